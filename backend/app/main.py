# backend/app/main.py

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routes import router as app_router
from config import Settings, get_settings
from services.favorites_repo import FavoritesRepo
from services.landing_resolver import UserLandingResolver
from services.shopify_client import build_shopify_client
from services.supabase_client import build_client

import logging

# Import routers
from api import system

logger = logging.getLogger(__name__)


def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Process-scoped dependencies, shared by every request
        # store client before the Shopify client, which owns a connection pool
        store = build_client(settings)
        shopify = build_shopify_client(settings)
        favorites = FavoritesRepo(
            store,
            table=settings.USERS_TABLE,
            schema=settings.USERS_SCHEMA,
        )
        app.state.shopify = shopify
        app.state.resolver = UserLandingResolver(
            shopify,
            favorites,
            remote_timeout=settings.REMOTE_TIMEOUT_SECONDS,
            store_timeout=settings.STORE_TIMEOUT_SECONDS,
        )
        logger.info(f"[Startup] Shopify shop={settings.SHOP_URL} api_version={settings.SHOPIFY_API_VERSION}")
        try:
            yield
        finally:
            await shopify.aclose()

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(
        title="Favorite Product Landing API",
        description="Shopify app proxy endpoint combining customer profile and favorite product",
        version="1.0.0",
        lifespan=build_lifespan(settings),
    )
    app.state.settings = settings

    # The storefront reaches us through the app proxy; direct calls come from the theme
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(system.router, tags=["System"])
    app.include_router(app_router, tags=["Main"])

    # Optional root route
    @app.get("/")
    def root():
        return {"message": "Favorite Product Landing API"}

    return app


app = create_app()
