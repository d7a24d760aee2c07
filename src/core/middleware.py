"""Middleware configuration for the FastAPI application.

This module registers the cross-cutting HTTP middleware: CORS for the single
configured browser origin, and response compression.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from src.core.config.settings import settings


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    CORS is only installed when an origin is configured; the API is
    read-only, so only GET and preflight requests are allowed.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    if settings.CORSORIGIN:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.CORSORIGIN],
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Content-Type", "Accept"],
            max_age=300,
        )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
