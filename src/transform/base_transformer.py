# src/transform/base_transformer.py — v1
"""Abstract transformation engine interface.

Engines are synchronous and deterministic for fixed file content; the
middleware runs them in a worker thread.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from transformcache.transform.models import TransformResult


class TransformError(Exception):
    """Raised when the engine rejects a source file."""

    def __init__(self, message: str, code_frame: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code_frame = code_frame

    def as_dict(self) -> dict[str, Any]:
        """Serializable view of the error for client-side reporting."""
        data: dict[str, Any] = {"message": self.message}
        if self.code_frame:
            data["codeFrame"] = self.code_frame
        return data


class BaseTransformer(ABC):
    """Unified interface for transformation engines."""

    @abstractmethod
    def transform(self, path: Path, options: dict[str, Any]) -> TransformResult:
        """Transform one source file.

        Raises:
            TransformError: If the source cannot be transformed.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine identifier (babel, command)."""
