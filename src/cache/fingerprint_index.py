# src/cache/fingerprint_index.py — v1
"""Source path → last-known fingerprint bookkeeping. No I/O."""

from __future__ import annotations

from pathlib import Path

from transformcache.cache.models import Fingerprint


class FingerprintIndex:
    """Remembers which fingerprint the artifact store holds for each source."""

    def __init__(self) -> None:
        self._entries: dict[str, Fingerprint] = {}

    def observe(self, path: str | Path) -> Fingerprint | None:
        """Last-known fingerprint for path, or None."""
        return self._entries.get(str(path))

    def set(self, path: str | Path, fingerprint: Fingerprint) -> None:
        self._entries[str(path)] = fingerprint

    def clear(self, path: str | Path, fingerprint: Fingerprint | None = None) -> bool:
        """Forget the entry for path.

        When ``fingerprint`` is given, the entry is only dropped if it still
        names that fingerprint, so a newer entry written meanwhile survives.

        Returns:
            True if an entry was removed.
        """
        key = str(path)
        current = self._entries.get(key)
        if current is None:
            return False
        if fingerprint is not None and current != fingerprint:
            return False
        del self._entries[key]
        return True

    def reset(self) -> None:
        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        return str(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
