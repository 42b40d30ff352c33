# tests/conftest.py — v1
"""Shared test fixtures for unit and integration tests.

Provides a fake transformation engine, a source tree in a temp directory and
settings/manager factories. No engine binaries are required.
"""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path
from typing import Any, Callable

import pytest

from transformcache.cache.manager import CacheManager
from transformcache.config.settings import Settings
from transformcache.transform.base_transformer import BaseTransformer, TransformError
from transformcache.transform.models import TransformResult

BASE_MTIME_NS = 1_700_000_000_000_000_000
SYNTAX_ERROR_MARKER = "@@syntax-error@@"


class FakeTransformer(BaseTransformer):
    """Deterministic engine: uppercases the source and prefixes a banner.

    Sources containing SYNTAX_ERROR_MARKER fail with a TransformError.
    """

    def __init__(self, with_map: bool = False, delay: float = 0.0) -> None:
        self.with_map = with_map
        self.delay = delay
        self.calls: list[Path] = []
        self.last_options: dict[str, Any] | None = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "fake"

    def transform(self, path: Path, options: dict[str, Any]) -> TransformResult:
        with self._lock:
            self.calls.append(path)
            self.last_options = options
        if self.delay:
            time.sleep(self.delay)
        source = path.read_text(encoding="utf-8")
        if SYNTAX_ERROR_MARKER in source:
            raise TransformError(
                f"{path.name}: Unexpected token (1:4)",
                code_frame="> 1 | let = 'oops'\n    |     ^",
            )
        source_map = None
        if self.with_map:
            source_map = {"version": 3, "sources": [path.name], "mappings": "AAAA"}
        return TransformResult(code=f"/* transformed */\n{source.upper()}", source_map=source_map)


def write_source(path: Path, content: str, mtime_ns: int = BASE_MTIME_NS) -> Path:
    """Write a source file and pin its mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


def expected_output(content: str) -> str:
    return f"/* transformed */\n{content.upper()}"


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Source tree: a.js, lib/b.js, vendor/raw.js, broken.js."""
    root = tmp_path / "src"
    write_source(root / "a.js", "let x=1")
    write_source(root / "lib" / "b.js", "const y = () => 2")
    write_source(root / "vendor" / "raw.js", "var untouched = true")
    write_source(root / "broken.js", f"let = 'oops' {SYNTAX_ERROR_MARKER}")
    return root


@pytest.fixture
def fake_transformer() -> FakeTransformer:
    return FakeTransformer()


@pytest.fixture
def make_settings(source_root: Path) -> Callable[..., Settings]:
    """Settings factory rooted at the temp source tree, ignoring any .env."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {"source_root": source_root}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def make_manager(make_settings, fake_transformer) -> Callable[..., CacheManager]:
    """CacheManager factory wired to the fake engine."""

    def _make(transformer: BaseTransformer | None = None, **overrides: Any) -> CacheManager:
        return CacheManager(
            make_settings(**overrides),
            transformer=transformer if transformer is not None else fake_transformer,
        )

    return _make


@pytest.fixture
def make_transformer() -> Callable[..., FakeTransformer]:
    """Factory for extra fake engines (with maps, delays...)."""
    return FakeTransformer


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """write_source(path, content, mtime_ns=BASE_MTIME_NS)."""
    return write_source


@pytest.fixture
def transformed() -> Callable[[str], str]:
    """Expected fake-engine output for a given source text."""
    return expected_output


@pytest.fixture
def base_mtime() -> int:
    return BASE_MTIME_NS
