# src/transform/command_transformer.py — v1
"""External command transformation engine (TRANSFORM_BACKEND=command).

Runs a configured command line, e.g. ``npx esbuild {path} --target=es2017``,
and serves whatever it prints on stdout. ``{path}`` is replaced by the source
file; when absent the path is appended as the last argument.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any

from transformcache.transform.base_transformer import BaseTransformer, TransformError
from transformcache.transform.models import TransformResult

logger = logging.getLogger(__name__)

_PATH_PLACEHOLDER = "{path}"


class CommandTransformer(BaseTransformer):
    """Delegate transformation to an external program."""

    def __init__(self, command: str) -> None:
        args = shlex.split(command)
        if not args:
            raise ValueError("command must not be empty")
        self._args = args

    @property
    def name(self) -> str:
        return "command"

    def build_args(self, path: Path, options: dict[str, Any]) -> list[str]:
        """Expand the command line for one source file.

        Options are appended as ``--key=value`` flags (``--key`` for True,
        skipped for False/None).
        """
        if any(_PATH_PLACEHOLDER in arg for arg in self._args):
            args = [arg.replace(_PATH_PLACEHOLDER, str(path)) for arg in self._args]
        else:
            args = [*self._args, str(path)]

        for key, value in options.items():
            if value is None or value is False:
                continue
            if value is True:
                args.append(f"--{key}")
            else:
                args.append(f"--{key}={value}")
        return args

    def transform(self, path: Path, options: dict[str, Any]) -> TransformResult:
        """Run the command and capture stdout."""
        args = self.build_args(path, options)
        logger.debug("Running %s", shlex.join(args))
        try:
            completed = subprocess.run(  # noqa: S603
                args, capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise TransformError(f"Cannot run {args[0]!r}: {e}") from e

        if completed.returncode != 0:
            stderr = completed.stderr.strip()
            raise TransformError(
                stderr or f"{args[0]} exited with status {completed.returncode}"
            )

        return TransformResult(code=completed.stdout)
