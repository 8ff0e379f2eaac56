"""
FastAPI application entry point for the site backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from production_api.config import get_settings
from production_api.errors import install_error_handlers
from production_api.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="360 Production API",
        description="API for managing projects",
        version="1.0.0",
        docs_url=settings.docs_url,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        # Refreshed access tokens come back in this header.
        expose_headers=["Authorization"],
    )
    install_error_handlers(app)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
