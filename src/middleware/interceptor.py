# src/middleware/interceptor.py — v1
"""Starlette middleware serving transformed source files through the cache.

Per request, in order:

1. side-artifact request (``*.map``): serve from the registry or pass on
2. resolve the path under SOURCE_ROOT; missing or not a regular file: pass on
3. excluded path: stream the raw source, uncached
4. fingerprint the source (path + mtime)
5. cache hit: serve the stored artifact
6. otherwise evict the stale artifact, transform, store, serve

Every branch produces exactly one response, either our own or the one from
the next handler.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import stat
import uuid
from pathlib import Path

from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import FileResponse, Response
from starlette.types import ASGIApp

from transformcache.cache.fingerprint import compute_fingerprint
from transformcache.cache.manager import CacheManager
from transformcache.logging.context import (
    clear_context,
    set_fingerprint_context,
    set_request_context,
)
from transformcache.middleware.error_presenter import SCRIPT_MEDIA_TYPE, ErrorPresenter
from transformcache.middleware.exclusions import ExclusionMatcher
from transformcache.transform.base_transformer import TransformError

logger = logging.getLogger(__name__)

CACHE_HEADER = "X-Transform-Cache"
CACHE_HIT_HEADER = "X-Transform-Cache-Hit"
CACHE_HASH_HEADER = "X-Transform-Cache-Hash"

SOURCE_MAP_MEDIA_TYPE = "application/json"

_HANDLED_METHODS = frozenset({"GET", "HEAD"})
_SCRIPT_EXTENSIONS = frozenset({".js", ".mjs", ".cjs"})


def _flag(value: bool) -> str:
    return "true" if value else "false"


def media_type_for(extension: str) -> str:
    """Media type of transformed output with the given extension."""
    if extension in _SCRIPT_EXTENSIONS:
        return SCRIPT_MEDIA_TYPE
    return mimetypes.guess_type(f"artifact{extension}")[0] or "text/plain"


def resolve_source(source_root: Path, request_path: str) -> tuple[Path, int] | None:
    """Map a request path to a regular file under source_root.

    Symlinks are not followed, and paths escaping the root are refused.

    Returns:
        (absolute source path, mtime in ns), or None if there is no such file.
    """
    candidate = Path(os.path.normpath(source_root / request_path.lstrip("/")))
    if candidate != source_root and source_root not in candidate.parents:
        return None
    try:
        st = candidate.lstat()
    except OSError:
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return candidate, st.st_mtime_ns


class TransformCacheMiddleware(BaseHTTPMiddleware):
    """Request interceptor: serve-cached, recompute, pass raw, or delegate."""

    def __init__(self, app: ASGIApp, manager: CacheManager) -> None:
        super().__init__(app)
        settings = manager.settings
        self._manager = manager
        self._source_root = settings.source_root.expanduser().resolve()
        self._prefix = "" if settings.url_prefix == "/" else settings.url_prefix
        self._exclusions = ExclusionMatcher(settings.exclude_patterns_list)
        self._errors = ErrorPresenter(settings.error_mode)
        self._media_type = media_type_for(settings.output_extension)

    @property
    def manager(self) -> CacheManager:
        return self._manager

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method not in _HANDLED_METHODS:
            return await call_next(request)

        request_path = self._relative_path(request.url.path)
        if request_path is None:
            return await call_next(request)

        set_request_context(uuid.uuid4().hex, request_path)
        try:
            return await self._intercept(request, request_path, call_next)
        finally:
            clear_context()

    async def _intercept(
        self, request: Request, request_path: str, call_next: RequestResponseEndpoint
    ) -> Response:
        side_artifacts = self._manager.side_artifacts
        if side_artifacts.matches(request_path):
            content = side_artifacts.get(request_path)
            if content is None:
                return await call_next(request)
            return Response(
                content,
                media_type=SOURCE_MAP_MEDIA_TYPE,
                headers={CACHE_HEADER: _flag(True)},
            )

        resolved = await run_in_threadpool(resolve_source, self._source_root, request_path)
        if resolved is None:
            return await call_next(request)
        source, mtime_ns = resolved

        if self._exclusions.is_excluded(request_path):
            logger.debug("Excluded: %s (%s)", request_path, self._exclusions.patterns)
            return FileResponse(source, headers={CACHE_HEADER: _flag(False)})

        fingerprint = compute_fingerprint(source, mtime_ns)
        set_fingerprint_context(fingerprint)
        logger.debug("Preparing: %s (%s)", source, fingerprint)

        headers = {CACHE_HEADER: _flag(True), CACHE_HASH_HEADER: fingerprint}

        cached = await self._manager.lookup(source, fingerprint)
        if cached is not None:
            headers[CACHE_HIT_HEADER] = _flag(True)
            if cached.file_path is not None:
                logger.debug("Serving (cached): %s", cached.file_path)
                return FileResponse(
                    cached.file_path, media_type=self._media_type, headers=headers
                )
            logger.debug("Serving (cached): %s", source)
            return Response(cached.body, media_type=self._media_type, headers=headers)

        headers[CACHE_HIT_HEADER] = _flag(False)
        try:
            result = await self._manager.recompute(source, fingerprint, request_path)
        except TransformError as e:
            logger.warning("Transform failed for %s: %s", source, e)
            return self._errors.present(e, headers=headers)

        background = BackgroundTask(result.persist) if result.persist is not None else None
        logger.debug("Serving (uncached): %s", source)
        return Response(
            result.body,
            media_type=self._media_type,
            headers=headers,
            background=background,
        )

    def _relative_path(self, path: str) -> str | None:
        """Request path relative to URL_PREFIX, or None when outside it."""
        if not self._prefix:
            return path
        if path == self._prefix:
            return "/"
        if path.startswith(self._prefix + "/"):
            return path[len(self._prefix):]
        return None
