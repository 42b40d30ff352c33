# src/cache/memory_store.py — v1
"""In-process artifact store (CACHE_PATH=memory).

Unbounded by default: entries only leave on supersede-eviction. An optional
``max_entries`` bound turns it into an LRU; an artifact dropped that way is
simply a miss on the next lookup and gets recomputed.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from transformcache.cache.base_artifact_store import BaseArtifactStore
from transformcache.cache.models import Artifact, Fingerprint

logger = logging.getLogger(__name__)


class MemoryArtifactStore(BaseArtifactStore):
    """Fingerprint → Artifact mapping living for the owner's lifetime."""

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._data: OrderedDict[Fingerprint, Artifact] = OrderedDict()

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._data)

    async def get(self, fingerprint: Fingerprint) -> Artifact | None:
        """Retrieve an artifact, marking it most recently used."""
        artifact = self._data.get(fingerprint)
        if artifact is not None and self._max_entries is not None:
            self._data.move_to_end(fingerprint)
        return artifact

    async def put(
        self,
        fingerprint: Fingerprint,
        primary: str,
        side_artifact: str | None = None,
    ) -> None:
        """Store an artifact, evicting the least recently used if bounded."""
        self._data[fingerprint] = Artifact(
            fingerprint=fingerprint, primary=primary, side_artifact=side_artifact
        )
        self._data.move_to_end(fingerprint)
        if self._max_entries is None:
            return
        while len(self._data) > self._max_entries:
            evicted, _ = self._data.popitem(last=False)
            logger.debug("LRU evicted %s", evicted)

    async def delete(self, fingerprint: Fingerprint) -> None:
        """Evict an artifact."""
        self._data.pop(fingerprint, None)

    async def contains(self, fingerprint: Fingerprint) -> bool:
        return fingerprint in self._data

    async def list_keys(self) -> list[Fingerprint]:
        return list(self._data)

    async def clear(self) -> int:
        count = len(self._data)
        self._data.clear()
        return count
