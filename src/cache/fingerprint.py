# src/cache/fingerprint.py — v1
"""Fingerprinting of source files by path and last-modification time.

A fingerprint identifies one observed version of a source file. It changes
whenever the file's mtime changes and is stable otherwise, so it can key the
artifact store without ever reading the file content.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

FINGERPRINT_LENGTH = 32


def compute_fingerprint(path: str | Path, mtime_ns: int) -> str:
    """Compute the fingerprint of a (path, mtime) pair.

    Args:
        path: Absolute path of the source file.
        mtime_ns: Last-modification time in nanoseconds (``st_mtime_ns``).

    Returns:
        32-character lowercase hex token.
    """
    token = f"{mtime_ns}-{os.fspath(path)}"
    return hashlib.md5(token.encode("utf-8")).hexdigest()  # noqa: S324


def stat_fingerprint(path: str | Path) -> str:
    """Fingerprint a file using its current mtime. Raises OSError if missing."""
    return compute_fingerprint(path, os.stat(path).st_mtime_ns)


def is_fingerprint(value: str) -> bool:
    """True if value has the shape of a fingerprint (used when scanning cache dirs)."""
    if len(value) != FINGERPRINT_LENGTH:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return value == value.lower()
