# tests/unit/cache/test_unit_fingerprint.py — v1
"""Tests for cache/fingerprint.py."""

from __future__ import annotations

import os

import pytest

from transformcache.cache.fingerprint import (
    FINGERPRINT_LENGTH,
    compute_fingerprint,
    is_fingerprint,
    stat_fingerprint,
)


class TestComputeFingerprint:
    def test_deterministic(self):
        a = compute_fingerprint("/src/a.js", 1_000)
        b = compute_fingerprint("/src/a.js", 1_000)
        assert a == b

    def test_fixed_length_hex(self):
        fp = compute_fingerprint("/src/a.js", 1_000)
        assert len(fp) == FINGERPRINT_LENGTH
        int(fp, 16)

    def test_mtime_change_changes_fingerprint(self):
        tokens = {compute_fingerprint("/src/a.js", t) for t in range(1_000, 1_050)}
        assert len(tokens) == 50

    def test_path_change_changes_fingerprint(self):
        assert compute_fingerprint("/src/a.js", 1) != compute_fingerprint("/src/b.js", 1)

    def test_accepts_path_objects(self, tmp_path):
        p = tmp_path / "a.js"
        assert compute_fingerprint(p, 5) == compute_fingerprint(str(p), 5)


class TestStatFingerprint:
    def test_uses_mtime(self, tmp_path):
        p = tmp_path / "a.js"
        p.write_text("x")
        os.utime(p, ns=(42, 42))
        assert stat_fingerprint(p) == compute_fingerprint(p, 42)

    def test_touch_changes_fingerprint(self, tmp_path):
        p = tmp_path / "a.js"
        p.write_text("x")
        os.utime(p, ns=(42, 42))
        before = stat_fingerprint(p)
        os.utime(p, ns=(43, 43))
        assert stat_fingerprint(p) != before

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            stat_fingerprint(tmp_path / "missing.js")


class TestIsFingerprint:
    def test_valid(self):
        assert is_fingerprint(compute_fingerprint("/a", 1))

    @pytest.mark.parametrize("value", ["", "abc", "z" * 32, "A" * 32, "0" * 31])
    def test_invalid(self, value):
        assert not is_fingerprint(value)
