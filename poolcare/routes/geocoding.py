"""
Address lookup endpoints backed by Nominatim.

Fills the service location form from a CEP or a typed address. Results are
cached in Redis and requests are rate limited per IP, since the public
Nominatim instance allows about one request per second.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..auth import CurrentUser, get_current_user
from ..cache import geocoding_cache
from ..config import GEOCODING_RPM
from ..rate_limiter import create_rate_limiter
from ..services.geocoding_service import (
    AddressValue,
    GeocodingError,
    InvalidPostalCode,
    NominatimClient,
    get_geocoder,
)
from ..shared.validators import normalize_postal_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geocoding", tags=["Geocoding"])

rate_limit_geocoding = create_rate_limiter(
    limit=GEOCODING_RPM,
    window_seconds=60,
    key_prefix="geocoding",
    use_ip=True,
)


class AddressResult(BaseModel):
    street: str = ""
    street_number: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    display_name: Optional[str] = None
    formatted: str = ""


class AddressSearchResponse(BaseModel):
    results: list[AddressResult]


def to_result(address: AddressValue) -> dict:
    return {**address.model_dump(), "formatted": address.formatted}


@router.get("/postal-code/{postal_code}", response_model=AddressResult)
async def lookup_postal_code(
    postal_code: str,
    current_user: CurrentUser = Depends(get_current_user),
    geocoder: NominatimClient = Depends(get_geocoder),
    _: None = Depends(rate_limit_geocoding),
):
    """Resolve a CEP (with or without the dash) to street, neighborhood, city and state"""
    digits = normalize_postal_code(postal_code)
    cached = geocoding_cache.get("cep", digits)
    if cached:
        return cached

    try:
        address = await geocoder.lookup_postal_code(postal_code)
    except InvalidPostalCode as e:
        raise HTTPException(status_code=400, detail="Invalid postal code. Enter a valid 8-digit CEP.") from e
    except GeocodingError as e:
        logger.error(f"❌ Postal code lookup failed for {digits}: {e}")
        raise HTTPException(status_code=502, detail="Error looking up the postal code. Please try again.") from e

    if address is None:
        raise HTTPException(status_code=404, detail="No address found for this postal code.")

    result = to_result(address)
    geocoding_cache.set("cep", digits, result)
    return result


@router.get("/search", response_model=AddressSearchResponse)
async def search_addresses(
    q: str = Query("", description="Free-text address or CEP"),
    current_user: CurrentUser = Depends(get_current_user),
    geocoder: NominatimClient = Depends(get_geocoder),
    _: None = Depends(rate_limit_geocoding),
):
    """Address suggestions for a typed query"""
    query = q.strip()
    if not query:
        return AddressSearchResponse(results=[])

    cached = geocoding_cache.get("search", query)
    if cached is not None:
        return {"results": cached}

    try:
        addresses = await geocoder.search(query)
    except InvalidPostalCode:
        return AddressSearchResponse(results=[])
    except GeocodingError as e:
        logger.error(f"❌ Address search failed for '{query}': {e}")
        raise HTTPException(status_code=502, detail="Error searching addresses. Please try again.") from e

    results = [to_result(a) for a in addresses]
    geocoding_cache.set("search", query, results)
    return {"results": results}


__all__ = ["router"]
