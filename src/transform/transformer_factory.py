# src/transform/transformer_factory.py — v1
"""Factory: instantiate the transformation engine from settings."""

from __future__ import annotations

import logging

from transformcache.config.settings import Settings
from transformcache.transform.base_transformer import BaseTransformer

logger = logging.getLogger(__name__)

_BACKENDS = ("babel", "command")


class UnsupportedTransformerError(ValueError):
    """Raised when a transform backend is not registered."""


def create_transformer(settings: Settings | None = None) -> BaseTransformer:
    """Instantiate the configured engine.

    Args:
        settings: Application settings. Defaults to Babel.

    Returns:
        Configured BaseTransformer implementation.

    Raises:
        UnsupportedTransformerError: If the backend is unknown.
    """
    backend = "babel" if settings is None else settings.transform_backend

    if backend == "babel":
        from transformcache.transform.babel_transformer import BabelTransformer
        return BabelTransformer()

    if backend == "command":
        from transformcache.transform.command_transformer import CommandTransformer
        if settings is None or not settings.transform_command.strip():
            raise ValueError(
                "TRANSFORMCACHE_TRANSFORM_COMMAND must be set when TRANSFORM_BACKEND=command"
            )
        return CommandTransformer(settings.transform_command)

    raise UnsupportedTransformerError(
        f"Unsupported transform backend: {backend!r}. "
        f"Available: {', '.join(_BACKENDS)}"
    )
