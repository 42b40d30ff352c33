# tests/unit/transform/test_unit_babel_transformer.py — v1
"""Tests for transform/babel_transformer.py — real Babel through dukpy."""

from __future__ import annotations

import sys

import pytest

from transformcache.transform.base_transformer import TransformError

dukpy = pytest.importorskip("dukpy")

from transformcache.transform.babel_transformer import BabelTransformer  # noqa: E402


class TestBabelTransformer:
    def test_compiles_es2015(self, tmp_path):
        src = tmp_path / "a.js"
        src.write_text("let x = 1;\nconst f = () => x;\n")
        result = BabelTransformer().transform(src, {"presets": ["es2015"]})
        assert "var x = 1" in result.code
        assert "=>" not in result.code

    def test_source_map(self, tmp_path):
        src = tmp_path / "a.js"
        src.write_text("let x = 1;\n")
        result = BabelTransformer().transform(src, {"presets": ["es2015"], "sourceMaps": True})
        assert result.source_map
        assert result.source_map["version"] == 3

    def test_syntax_error(self, tmp_path):
        src = tmp_path / "broken.js"
        src.write_text("let = = 1;\n")
        with pytest.raises(TransformError):
            BabelTransformer().transform(src, {"presets": ["es2015"]})

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(TransformError, match="Cannot read"):
            BabelTransformer().transform(tmp_path / "missing.js", {})

    def test_name(self):
        assert BabelTransformer().name == "babel"


class TestBabelImportError:
    def test_clear_message_without_dukpy(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "dukpy", None)
        with pytest.raises(ImportError, match="dukpy"):
            BabelTransformer()
