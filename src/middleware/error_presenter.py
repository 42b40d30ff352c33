# src/middleware/error_presenter.py — v1
"""Render transformation failures for the client.

``status`` mode answers 500 with the raw error. ``console`` mode answers with
a script that reports the error in the browser console, so a broken module
shows up in devtools instead of failing to load silently.
"""

from __future__ import annotations

import json
from typing import Literal

from starlette.responses import PlainTextResponse, Response

from transformcache.transform.base_transformer import TransformError

ErrorMode = Literal["status", "console"]

SCRIPT_MEDIA_TYPE = "application/javascript"


def escape_quotes(text: str) -> str:
    """Backslash-escape single and double quotes."""
    return text.replace("'", "\\'").replace('"', '\\"')


def render_console_script(error: TransformError) -> str:
    """Build the script body reporting ``error`` via ``console.error``."""
    # Embedded in a string literal: backslashes and newlines need escaping too
    text = str(error).replace("\\", "\\\\")
    message = escape_quotes(text).replace("\r", "\\r").replace("\n", "\\n")
    return (
        "/* Transformation error from transformcache */"
        "\n /* See error console output for details. */"
        f"\n var output = {json.dumps(error.as_dict())}"
        f'\n console.error("{message}", output.codeFrame)'
    )


class ErrorPresenter:
    """Turns a TransformError into exactly one response."""

    def __init__(self, mode: ErrorMode = "status") -> None:
        if mode not in ("status", "console"):
            raise ValueError(f"Unsupported error mode: {mode!r}")
        self._mode = mode

    def present(self, error: TransformError, headers: dict[str, str] | None = None) -> Response:
        if self._mode == "console":
            return Response(
                render_console_script(error),
                status_code=200,
                media_type=SCRIPT_MEDIA_TYPE,
                headers=headers,
            )
        return PlainTextResponse(str(error), status_code=500, headers=headers)
