# src/cache/side_artifacts.py — v1
"""In-process registry of side artifacts (source maps).

Keyed by the request path of the side artifact itself (``/a.js.map``), not
by fingerprint: an entry stays until the next recomputation of its source
overwrites it. Never persisted.
"""

from __future__ import annotations

import json
from typing import Any


def serialize_source_map(source_map: str | dict[str, Any]) -> str:
    """Return the map as a JSON string, whatever form the engine produced."""
    if isinstance(source_map, str):
        return source_map
    return json.dumps(source_map)


class SideArtifactRegistry:
    """Request path → serialized side artifact."""

    def __init__(self, suffix: str = ".map") -> None:
        self._suffix = suffix
        self._entries: dict[str, str] = {}

    @property
    def suffix(self) -> str:
        return self._suffix

    def matches(self, request_path: str) -> bool:
        """Whether a request path names a side artifact."""
        return request_path.endswith(self._suffix)

    def key_for(self, request_path: str) -> str:
        """Side-artifact request path for a primary request path."""
        return f"{request_path}{self._suffix}"

    def register(self, request_path: str, content: str) -> str:
        """Store content for the primary ``request_path``. Returns the key used."""
        key = self.key_for(request_path)
        self._entries[key] = content
        return key

    def get(self, side_request_path: str) -> str | None:
        return self._entries.get(side_request_path)

    def reset(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
