"""Security and caching headers for API responses."""

from fastapi import FastAPI, Request
from fastapi.responses import Response

from apps.shared.config import Settings, get_settings


DEFAULT_CSP = (
    "default-src 'self'; "
    "img-src 'self' data: https:; "
    "font-src 'self' data: https:; "
    "script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; "
    "connect-src 'self'"
)

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"


def build_security_headers(settings: Settings) -> dict[str, str]:
    """Headers added to every response unless the route already set them."""
    headers = {
        "Content-Security-Policy": DEFAULT_CSP,
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-cache, no-store, must-revalidate",
    }
    # HSTS only makes sense behind TLS
    if settings.is_production:
        headers["Strict-Transport-Security"] = HSTS_VALUE
    return headers


def setup_security_headers(app: FastAPI, settings: Settings = None) -> None:
    """Add the security header middleware."""
    headers = build_security_headers(settings or get_settings())

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
