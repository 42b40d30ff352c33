# src/transform/babel_transformer.py — v1
"""Babel transformation engine (TRANSFORM_BACKEND=babel).

Requires 'dukpy' package: pip install dukpy.
Runs the Babel compiler bundled with dukpy inside its embedded JS interpreter.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from transformcache.transform.base_transformer import BaseTransformer, TransformError
from transformcache.transform.models import TransformResult

logger = logging.getLogger(__name__)


class BabelTransformer(BaseTransformer):
    """ES2015+ → ES5 via dukpy.babel_compile."""

    def __init__(self) -> None:
        try:
            import dukpy
        except ImportError as e:
            raise ImportError(
                "dukpy package required: pip install dukpy"
            ) from e

        self._dukpy = dukpy

    @property
    def name(self) -> str:
        return "babel"

    def transform(self, path: Path, options: dict[str, Any]) -> TransformResult:
        """Compile one file with Babel."""
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TransformError(f"Cannot read {path}: {e}") from e

        babel_options = dict(options)
        babel_options["highlightCode"] = False
        babel_options.setdefault("filename", path.name)

        try:
            result = self._dukpy.babel_compile(source, **babel_options)
        except self._dukpy.JSRuntimeError as e:
            message = str(e)
            raise TransformError(message, code_frame=_extract_code_frame(message)) from e

        return TransformResult(code=result["code"], source_map=result.get("map") or None)


def _extract_code_frame(message: str) -> str | None:
    """Babel appends the offending source lines after the first line of the message."""
    _, _, rest = message.partition("\n")
    return rest.strip("\n") or None
