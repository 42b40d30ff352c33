# src/middleware/exclusions.py — v1
"""Exclusion rules: request paths that bypass transformation and caching."""

from __future__ import annotations

from fnmatch import fnmatchcase


def normalize_request_path(request_path: str) -> str:
    """Strip leading and trailing slashes: ``/lib/a.js/`` → ``lib/a.js``."""
    return request_path.strip("/")


def matches_any(path: str, patterns: list[str]) -> bool:
    """Whether a normalized path matches any glob pattern.

    ``**/`` at the start of a pattern also matches at the top level, so
    ``**/*.min.js`` excludes ``app.min.js`` as well as ``vendor/app.min.js``.
    """
    for pattern in patterns:
        if fnmatchcase(path, pattern):
            return True
        if pattern.startswith("**/") and fnmatchcase(path, pattern[3:]):
            return True
    return False


class ExclusionMatcher:
    """Evaluated on every request; results are never cached."""

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns = list(patterns or [])

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def is_excluded(self, request_path: str) -> bool:
        if not self._patterns:
            return False
        return matches_any(normalize_request_path(request_path), self._patterns)
