# src/cache/models.py — v1
"""Cache domain models: Artifact and CacheResult."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel

Fingerprint = str


class Artifact(BaseModel):
    """Transformed output for one source file at one fingerprint."""

    fingerprint: Fingerprint
    primary: str
    side_artifact: str | None = None


@dataclass
class CacheResult:
    """What the cache manager hands back to the interceptor for one request.

    Exactly one of ``body`` and ``file_path`` is set. ``persist`` is the
    deferred disk write for a fresh artifact; it runs after the response.
    """

    fingerprint: Fingerprint
    hit: bool
    body: str | None = None
    file_path: Path | None = None
    persist: Callable[[], Awaitable[None]] | None = None
