import logging
import os
import time
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError

from . import models  # noqa: F401  registers tables on Base
from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.appointments.router import router as appointments_router
from .domain.catalog.router import router as catalog_router
from .domain.cleaners.router import router as cleaners_router
from .domain.clients.router import locations_router
from .domain.clients.router import router as clients_router
from .domain.dashboard.router import router as dashboard_router
from .domain.tracking.router import router as tracking_router
from .rate_limiter import get_redis_client
from .routes import auth, geocoding
from .security_headers import SecurityHeadersMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 PoolCare API starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except OperationalError as e:
        # Another worker may be creating the same tables
        if "already exists" not in str(e):
            raise
        logger.info("Tables already created by another worker")

    try:
        if get_redis_client() is None:
            logger.info("Redis disabled - rate limits kept in memory, geocoding cache off")
    except redis.RedisError as e:
        logger.warning(f"⚠️ Redis unreachable - rate limits kept in memory: {e}")

    yield
    logger.info("PoolCare API shutting down")


app = FastAPI(title="PoolCare API", version="1.0.0", lifespan=lifespan)


def _serializable_errors(exc: RequestValidationError) -> list:
    # ValueError instances in ctx are not JSON serializable
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """A missing or malformed Authorization header is a 401, anything else a 422"""
    for error in exc.errors():
        if "authorization" in str(error.get("loc", "")).lower():
            logger.warning(f"Missing or invalid Authorization header on {request.url.path}")
            return JSONResponse(
                status_code=401,
                content={"detail": "Not authenticated. Please provide a valid Bearer token."},
            )

    logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(_serializable_errors(exc))})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Unique and foreign key violations that slipped past service checks"""
    message = str(exc.orig).lower()
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    if "unique" in message and "email" in message:
        return JSONResponse(status_code=409, content={"detail": "Email already registered"})
    return JSONResponse(status_code=409, content={"detail": "Operation conflicts with existing records"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} failed: {e}")
        raise

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"📥 {request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(dashboard_router)
app.include_router(clients_router)
app.include_router(locations_router)
app.include_router(cleaners_router)
app.include_router(catalog_router)
app.include_router(appointments_router)
app.include_router(tracking_router)
app.include_router(geocoding.router)


@app.get("/")
def root():
    return {"message": "PoolCare API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Redis status for monitoring: healthy, disabled or unhealthy"""
    try:
        client = get_redis_client()
        if client is None:
            return {"status": "disabled", "redis": {"connected": False}}

        started = time.perf_counter()
        client.ping()
        return {
            "status": "healthy",
            "redis": {
                "connected": True,
                "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
                "version": client.info().get("redis_version", "unknown"),
            },
        }
    except redis.RedisError as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
