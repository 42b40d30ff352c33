# src/app.py — v1
"""ASGI application factory.

Usage:
    from transformcache.app import create_app
    app = create_app(load_settings(source_root="static/js", url_prefix="/js"))

The cache middleware sits in front of a static-file handler mounted at
URL_PREFIX, which serves whatever the middleware passes on (missing maps,
files outside the prefix are left to the router's 404).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Mount
from starlette.staticfiles import StaticFiles

from transformcache.cache.manager import CacheManager
from transformcache.config.settings import Settings, load_settings
from transformcache.middleware.interceptor import TransformCacheMiddleware

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    manager: CacheManager | None = None,
) -> Starlette:
    """Build the application and its cache manager.

    Args:
        settings: Application settings. Loaded from .env if None.
        manager: Pre-built cache manager (tests inject fake engines this way).

    Returns:
        Starlette app; the manager is reachable as ``app.state.cache_manager``.
    """
    if settings is None:
        settings = manager.settings if manager is not None else load_settings()
    if manager is None:
        manager = CacheManager(settings)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(
            "Serving %s at %s (cache: %s, engine: %s)",
            settings.source_root,
            settings.url_prefix,
            settings.cache_path,
            manager.transformer.name,
        )
        yield
        await manager.close()
        logger.info("Cache manager closed")

    routes = [
        Mount(
            settings.url_prefix,
            app=StaticFiles(directory=settings.source_root, check_dir=False),
        )
    ]
    app = Starlette(
        debug=settings.debug,
        routes=routes,
        middleware=[Middleware(TransformCacheMiddleware, manager=manager)],
        lifespan=lifespan,
    )
    app.state.cache_manager = manager
    return app
