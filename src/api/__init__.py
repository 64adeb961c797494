"""FastAPI application setup."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.controller import create_product_router
from src.catalog.config import AppConfig, get_config, get_environment
from src.catalog.services import ProductStore, SqliteProductStore

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[ProductStore] = None,
    config: Optional[AppConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Product store to serve. Defaults to a SQLite store at the
            configured database path.
        config: Application configuration. Defaults to the loaded config file.
    """
    config = config or get_config()

    logging.basicConfig(
        level=config.logging.numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting {config.api.title} ({get_environment()} environment)")

    if store is None:
        store = SqliteProductStore(config.database.path)
        logger.info(f"Serving products from {config.database.path}")

    app = FastAPI(
        title=config.api.title,
        description="CRUD API for the product catalog",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count", "X-Total-Pages"],
    )

    # Include routers
    app.include_router(create_product_router(store))

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
