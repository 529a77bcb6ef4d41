"""
Security headers for API responses.

The API only serves JSON. Map tiles and geocoding are fetched by the browser
straight from their providers, so the content security policy stays closed.
"""

import os
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import ALLOWED_ORIGINS

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

DISABLED_FEATURES = ("accelerometer", "camera", "geolocation", "microphone", "payment", "usb")


def build_security_headers(origins: list[str], production: bool = IS_PRODUCTION) -> dict[str, str]:
    frame_ancestors = " ".join(["'self'", *(o.strip() for o in origins if o.strip())])
    headers = {
        "X-Frame-Options": "SAMEORIGIN",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Content-Security-Policy": f"default-src 'none'; frame-ancestors {frame_ancestors}; base-uri 'none'",
        "Permissions-Policy": ", ".join(f"{feature}=()" for feature in DISABLED_FEATURES),
    }
    if production:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to every response outside ``exclude_paths``"""

    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ())
        self.headers = build_security_headers(ALLOWED_ORIGINS)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        if request.url.path.startswith(self.exclude_paths):
            return response

        response.headers.update(self.headers)
        # Responses carry client data
        response.headers.setdefault("Cache-Control", "no-store")
        return response
