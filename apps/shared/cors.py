"""Centralised CORS configuration for the blog client."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.shared.config import Settings, get_settings


# Development origins (only outside production)
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "https://localhost:3000",
]


def get_allowed_origins(settings: Settings) -> list[str]:
    """Build the list of allowed CORS origins for the current environment."""
    origins = list(settings.cors_origins)

    if settings.frontend_url:
        clean_url = settings.frontend_url.rstrip("/")
        if clean_url not in origins:
            origins.append(clean_url)

    if not settings.is_production:
        origins.extend(o for o in DEV_ORIGINS if o not in origins)

    return origins


def setup_cors(app: FastAPI, settings: Settings = None) -> None:
    """Add CORS middleware to a FastAPI app."""
    settings = settings or get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
