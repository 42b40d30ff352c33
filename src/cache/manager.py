# src/cache/manager.py — v1
"""Cache manager: owns the fingerprint index, the artifact store, the
side-artifact registry and the transformation engine for one application.

Created at startup and closed at shutdown. All mutable cache state hangs off
this object; nothing is module-global.
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import logging
import posixpath
from pathlib import Path
from typing import Any

from starlette.concurrency import run_in_threadpool

from transformcache.cache.base_artifact_store import BaseArtifactStore
from transformcache.cache.fingerprint_index import FingerprintIndex
from transformcache.cache.models import CacheResult, Fingerprint
from transformcache.cache.side_artifacts import SideArtifactRegistry, serialize_source_map
from transformcache.cache.store_factory import create_artifact_store
from transformcache.config.settings import Settings
from transformcache.transform.base_transformer import BaseTransformer, TransformError
from transformcache.transform.transformer_factory import create_transformer

logger = logging.getLogger(__name__)

_InflightKey = tuple[str, Fingerprint]


class CacheManager:
    """Decides hit vs. recompute for a resolved source file and keeps the
    index and store consistent across supersedes and storage failures."""

    def __init__(
        self,
        settings: Settings,
        store: BaseArtifactStore | None = None,
        transformer: BaseTransformer | None = None,
        index: FingerprintIndex | None = None,
        side_artifacts: SideArtifactRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._store = store if store is not None else create_artifact_store(settings)
        self._transformer = (
            transformer if transformer is not None else create_transformer(settings)
        )
        self._index = index if index is not None else FingerprintIndex()
        self._side_artifacts = (
            side_artifacts
            if side_artifacts is not None
            else SideArtifactRegistry(settings.side_artifact_suffix)
        )
        self._inflight: dict[_InflightKey, asyncio.Task[CacheResult]] = {}
        self._closed = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def store(self) -> BaseArtifactStore:
        return self._store

    @property
    def index(self) -> FingerprintIndex:
        return self._index

    @property
    def side_artifacts(self) -> SideArtifactRegistry:
        return self._side_artifacts

    @property
    def transformer(self) -> BaseTransformer:
        return self._transformer

    @property
    def closed(self) -> bool:
        return self._closed

    async def lookup(self, source: Path, fingerprint: Fingerprint) -> CacheResult | None:
        """Return a cache hit for (source, fingerprint), or None on a miss.

        For the disk backend the index is reconciled first: an artifact file
        already present for this fingerprint is adopted, which covers restarts
        over a warm cache directory.
        """
        if self._store.serves_files:
            if await self._store.contains(fingerprint):
                await self._evict_superseded(source, fingerprint)
                self._index.set(source, fingerprint)
                return CacheResult(
                    fingerprint=fingerprint,
                    hit=True,
                    file_path=self._store.path_for(fingerprint),
                )
            if self._index.observe(source) == fingerprint:
                # Index is ahead of the disk: the file or the whole directory went away.
                await self._store.ensure_root()
            return None

        if self._index.observe(source) != fingerprint:
            return None
        artifact = await self._store.get(fingerprint)
        if artifact is None:
            return None
        return CacheResult(fingerprint=fingerprint, hit=True, body=artifact.primary)

    async def recompute(
        self, source: Path, fingerprint: Fingerprint, request_path: str
    ) -> CacheResult:
        """Evict the stale artifact, run the engine and store the result.

        With ``coalesce_recompute`` on, concurrent callers for the same
        (source, fingerprint) share one engine run; only the first caller gets
        the deferred disk write.

        Raises:
            TransformError: If the engine rejects the source. Nothing is cached.
        """
        if not self._settings.coalesce_recompute:
            return await self._recompute(source, fingerprint, request_path)

        key = (str(source), fingerprint)
        task = self._inflight.get(key)
        if task is not None:
            logger.debug("Joining in-flight recompute of %s", source)
            result = await asyncio.shield(task)
            return dataclasses.replace(result, persist=None)

        task = asyncio.create_task(self._recompute(source, fingerprint, request_path))
        self._inflight[key] = task
        task.add_done_callback(functools.partial(self._forget_inflight, key))
        return await asyncio.shield(task)

    async def close(self) -> None:
        """Wait for in-flight recomputes and drop all in-process state.

        Artifacts already written to a cache directory are kept.
        """
        if self._closed:
            return
        self._closed = True
        pending = list(self._inflight.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._index.reset()
        self._side_artifacts.reset()
        if not self._store.serves_files:
            await self._store.clear()

    def stats(self) -> dict[str, Any]:
        """Snapshot of in-process cache state."""
        return {
            "backend": "disk" if self._store.serves_files else "memory",
            "indexed_sources": len(self._index),
            "side_artifacts": len(self._side_artifacts),
            "inflight": len(self._inflight),
        }

    async def _recompute(
        self, source: Path, fingerprint: Fingerprint, request_path: str
    ) -> CacheResult:
        await self._evict_superseded(source, fingerprint)

        try:
            result = await run_in_threadpool(
                self._transformer.transform, source, dict(self._settings.transform_options)
            )
        except TransformError:
            raise
        except Exception as e:
            logger.exception("Transformer %s crashed on %s", self._transformer.name, source)
            raise TransformError(f"{type(e).__name__}: {e}") from e

        code = result.code
        side_artifact = None
        if result.source_map:
            side_artifact = serialize_source_map(result.source_map)
            self._side_artifacts.register(request_path, side_artifact)
            map_name = posixpath.basename(request_path) + self._side_artifacts.suffix
            code += f"\n//# sourceMappingURL={map_name}"

        # Another recompute of this source may have finished while the engine ran.
        await self._evict_superseded(source, fingerprint)
        self._index.set(source, fingerprint)

        if self._store.serves_files:
            persist = functools.partial(self._persist, source, fingerprint, code)
            return CacheResult(fingerprint=fingerprint, hit=False, body=code, persist=persist)

        await self._store.put(fingerprint, code, side_artifact)
        return CacheResult(fingerprint=fingerprint, hit=False, body=code)

    async def _persist(self, source: Path, fingerprint: Fingerprint, code: str) -> None:
        """Deferred disk write. A failure only forgets the index entry."""
        try:
            await self._store.put(fingerprint, code)
        except OSError as e:
            logger.warning("Error saving %s for %s: %s", fingerprint, source, e)
            self._index.clear(source, fingerprint)
            return
        current = self._index.observe(source)
        if current is not None and current != fingerprint:
            # Superseded before the write landed.
            await self._store.delete(fingerprint)
            logger.debug("Dropped superseded %s for %s", fingerprint, source)
            return
        logger.debug("Saved %s", fingerprint)

    async def _evict_superseded(self, source: Path, fingerprint: Fingerprint) -> None:
        """Drop the artifact indexed for source if it is not fingerprint."""
        stale = self._index.observe(source)
        if stale is None or stale == fingerprint:
            return
        await self._store.delete(stale)
        self._index.clear(source, stale)
        logger.debug("Evicted %s for %s", stale, source)

    def _forget_inflight(self, key: _InflightKey, task: asyncio.Task[CacheResult]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
