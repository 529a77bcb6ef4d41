"""
Nominatim (OpenStreetMap) address lookup.

Resolves a CEP or a free-text address into the address fields of a service
location. No API key is required, only an identifying User-Agent. The first
result is taken as-is; there is no confidence scoring.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from ..config import (
    GEOCODING_COUNTRY,
    GEOCODING_COUNTRY_CODES,
    GEOCODING_POSTAL_COUNTRY,
    GEOCODING_SEARCH_LIMIT,
    NOMINATIM_ACCEPT_LANGUAGE,
    NOMINATIM_BASE_URL,
    NOMINATIM_TIMEOUT_SECONDS,
    NOMINATIM_USER_AGENT,
)
from ..shared.validators import format_postal_code, normalize_postal_code, validate_postal_code

logger = logging.getLogger(__name__)

# Nominatim spreads the same concept over several keys depending on the place
STREET_KEYS = ("road", "street", "residential", "path", "pedestrian")
NEIGHBORHOOD_KEYS = ("suburb", "neighbourhood", "subdistrict")
CITY_KEYS = ("city", "town", "village", "city_district")


class GeocodingError(Exception):
    """The geocoding provider failed or returned something unusable"""


class InvalidPostalCode(ValueError):
    """CEP does not have 8 digits"""


class AddressValue(BaseModel):
    street: str = ""
    street_number: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    display_name: Optional[str] = None

    @property
    def formatted(self) -> str:
        return ", ".join(
            p for p in (self.street, self.street_number, self.neighborhood, self.city) if p
        )


def _first(address: dict, keys: tuple[str, ...]) -> str:
    for key in keys:
        if address.get(key):
            return address[key]
    return ""


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def map_result(result: dict, postal_code: Optional[str] = None) -> AddressValue:
    """Map one Nominatim search result to our address fields"""
    address = result.get("address") or {}
    return AddressValue(
        street=_first(address, STREET_KEYS),
        street_number=address.get("house_number") or "",
        neighborhood=_first(address, NEIGHBORHOOD_KEYS),
        city=_first(address, CITY_KEYS),
        state=address.get("state") or "",
        postal_code=postal_code if postal_code is not None else (address.get("postcode") or ""),
        latitude=_to_float(result.get("lat")),
        longitude=_to_float(result.get("lon")),
        display_name=result.get("display_name"),
    )


class NominatimClient:
    """Thin async client over the Nominatim /search endpoint"""

    def __init__(
        self,
        base_url: str = NOMINATIM_BASE_URL,
        user_agent: str = NOMINATIM_USER_AGENT,
        accept_language: str = NOMINATIM_ACCEPT_LANGUAGE,
        country: str = GEOCODING_COUNTRY,
        country_codes: str = GEOCODING_COUNTRY_CODES,
        postal_country: str = GEOCODING_POSTAL_COUNTRY,
        timeout: float = NOMINATIM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.country = country
        self.country_codes = country_codes
        self.postal_country = postal_country
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "User-Agent": user_agent,
            "Accept-Language": accept_language,
            "Accept": "application/json",
        }

    async def _search(self, params: dict) -> list[dict]:
        query = {"format": "json", "addressdetails": "1", **params}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(f"{self.base_url}/search", params=query, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"❌ Nominatim request failed: {e}")
            raise GeocodingError("Geocoding provider unreachable") from e

        if resp.status_code >= 400:
            logger.warning(f"Nominatim error {resp.status_code}: {resp.text[:200]}")
            raise GeocodingError(f"Geocoding provider returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"❌ Nominatim returned invalid JSON: {resp.text[:200]}")
            raise GeocodingError("Invalid geocoding response") from e

        return data if isinstance(data, list) else []

    async def lookup_postal_code(self, postal_code: str) -> Optional[AddressValue]:
        """
        Resolve a CEP to an address.

        Returns None when Nominatim has nothing for the CEP.

        Raises:
            InvalidPostalCode: CEP does not have 8 digits
            GeocodingError: provider failure
        """
        if not validate_postal_code(postal_code):
            raise InvalidPostalCode(postal_code)

        formatted = format_postal_code(postal_code)
        results = await self._search(
            {"postalcode": formatted, "country": self.postal_country, "limit": "1"}
        )
        if not results:
            logger.info(f"No address found for CEP {formatted}")
            return None

        return map_result(results[0], postal_code=formatted)

    async def search(self, query: str, limit: int = GEOCODING_SEARCH_LIMIT) -> list[AddressValue]:
        """Free-text address suggestions. A query holding exactly 8 digits is looked up as a CEP."""
        query = (query or "").strip()
        if not query:
            return []

        if len(normalize_postal_code(query)) == 8:
            address = await self.lookup_postal_code(query)
            return [address] if address else []

        params = {"q": f"{query}, {self.country}", "limit": str(limit)}
        if self.country_codes:
            params["countrycodes"] = self.country_codes
        results = await self._search(params)
        return [map_result(item) for item in results]


def get_geocoder() -> NominatimClient:
    """Dependency injection for the geocoding client"""
    return NominatimClient()
