import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./poolcare.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

# Frontend base URL (CORS / security headers)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000"
).split(",")

# Business day boundaries ("today", "this week") are computed in this zone
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Sao_Paulo")

# Nominatim (OpenStreetMap) geocoding
# Nominatim usage policy requires an identifying User-Agent
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org").rstrip("/")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "PoolServiceApp/1.0")
NOMINATIM_ACCEPT_LANGUAGE = os.getenv("NOMINATIM_ACCEPT_LANGUAGE", "pt-BR")
NOMINATIM_TIMEOUT_SECONDS = float(os.getenv("NOMINATIM_TIMEOUT_SECONDS", "10"))
GEOCODING_COUNTRY = os.getenv("GEOCODING_COUNTRY", "Brasil")
GEOCODING_COUNTRY_CODES = os.getenv("GEOCODING_COUNTRY_CODES", "br")
# Structured postalcode queries match the English country name
GEOCODING_POSTAL_COUNTRY = os.getenv("GEOCODING_POSTAL_COUNTRY", "brazil")
GEOCODING_SEARCH_LIMIT = int(os.getenv("GEOCODING_SEARCH_LIMIT", "5"))
GEOCODING_CACHE_SECONDS = int(os.getenv("GEOCODING_CACHE_SECONDS", "3600"))
GEOCODING_RPM = int(os.getenv("GEOCODING_RPM", "60"))  # 1 per second per Nominatim policy

LOGIN_RPM = int(os.getenv("LOGIN_RPM", "10"))

# Live location polling
LIVE_REFRESH_SECONDS = int(os.getenv("LIVE_REFRESH_SECONDS", "30"))

# Map display (tiles are fetched by the browser, we only hand out the template)
MAP_TILE_URL = os.getenv("MAP_TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png")
MAP_ATTRIBUTION = os.getenv(
    "MAP_ATTRIBUTION",
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors',
)
MAP_DEFAULT_LAT = float(os.getenv("MAP_DEFAULT_LAT", "-23.5505"))  # São Paulo
MAP_DEFAULT_LNG = float(os.getenv("MAP_DEFAULT_LNG", "-46.6333"))
MAP_DEFAULT_ZOOM = int(os.getenv("MAP_DEFAULT_ZOOM", "11"))
MAP_DETAIL_ZOOM = int(os.getenv("MAP_DETAIL_ZOOM", "15"))
MAP_MARKER_ICON_URL = os.getenv(
    "MAP_MARKER_ICON_URL", "https://unpkg.com/leaflet@1.7.1/dist/images/marker-icon.png"
)

# Redis (rate limiting + geocoding cache). Disabled -> in-memory limits, no cache
REDIS_ENABLED = os.getenv("REDIS_ENABLED", "true").lower() == "true"
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD") or None
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"
