# src/cache/store_factory.py — v1
"""Factory for artifact store instantiation."""

from __future__ import annotations

from transformcache.cache.base_artifact_store import BaseArtifactStore
from transformcache.config.settings import Settings


def create_artifact_store(settings: Settings | None = None) -> BaseArtifactStore:
    """Instantiate the configured artifact backend.

    Args:
        settings: Application settings. Defaults to the memory backend.

    Returns:
        Configured BaseArtifactStore implementation.
    """
    if settings is None or settings.is_memory_cache:
        from transformcache.cache.memory_store import MemoryArtifactStore
        max_entries = None if settings is None else settings.memory_max_entries
        return MemoryArtifactStore(max_entries=max_entries)

    from transformcache.cache.disk_store import DiskArtifactStore
    return DiskArtifactStore(
        cache_root=settings.cache_dir, extension=settings.output_extension
    )
