# rental_quotes/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rental_quotes import __version__
from rental_quotes.core.config import Settings
from rental_quotes.core.db import Database
from rental_quotes.core.errors import register_exception_handlers
from rental_quotes.core.logging import configure_logging
from rental_quotes.middleware.request_logger import RequestLoggerMiddleware
from rental_quotes.routers import api_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Rental Quotation API",
        description="FastAPI backend for equipment rental catalog and quotations",
        version=__version__,
    )
    app.state.settings = settings
    app.state.db = Database(settings)

    # CORS setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggerMiddleware)
    register_exception_handlers(app, settings)

    # Health check endpoint
    @app.get("/", tags=["Health"])
    async def health_check():
        return {"status": True, "message": "Backend is running"}

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def on_startup():
        await app.state.db.init_models()
        logger.info("Rental quotation API started (%s)", settings.environment)

    @app.on_event("shutdown")
    async def on_shutdown():
        await app.state.db.dispose()

    return app
