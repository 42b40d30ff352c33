# src/cache/base_artifact_store.py — v1
"""Abstract artifact store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from transformcache.cache.models import Artifact, Fingerprint


class BaseArtifactStore(ABC):
    """Unified interface for artifact storage backends."""

    #: True when hits are served straight from a file on disk.
    serves_files: bool = False

    @abstractmethod
    async def get(self, fingerprint: Fingerprint) -> Artifact | None:
        """Retrieve an artifact by fingerprint."""

    @abstractmethod
    async def put(
        self,
        fingerprint: Fingerprint,
        primary: str,
        side_artifact: str | None = None,
    ) -> None:
        """Store an artifact."""

    @abstractmethod
    async def delete(self, fingerprint: Fingerprint) -> None:
        """Evict an artifact. Absence is not an error."""

    @abstractmethod
    async def contains(self, fingerprint: Fingerprint) -> bool:
        """Whether an artifact for fingerprint is currently present."""

    @abstractmethod
    async def list_keys(self) -> list[Fingerprint]:
        """List fingerprints of all stored artifacts."""

    def path_for(self, fingerprint: Fingerprint) -> Path | None:
        """File backing a fingerprint, for backends that serve files."""
        return None

    async def ensure_root(self) -> bool:
        """Re-create backing storage if it vanished. Returns True if it did."""
        return False

    async def clear(self) -> int:
        """Evict everything. Returns the number of artifacts removed."""
        keys = await self.list_keys()
        for key in keys:
            await self.delete(key)
        return len(keys)
