# src/transform/models.py — v1
"""Transformation engine result model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class TransformResult(BaseModel):
    """Output of one engine run: transformed code plus an optional source map."""

    code: str
    source_map: str | dict[str, Any] | None = None
