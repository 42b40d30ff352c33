# tests/unit/middleware/test_unit_exclusions.py — v1
"""Tests for middleware/exclusions.py."""

from __future__ import annotations

import pytest

from transformcache.middleware.exclusions import (
    ExclusionMatcher,
    matches_any,
    normalize_request_path,
)


class TestNormalize:
    @pytest.mark.parametrize("raw,expected", [
        ("/a.js", "a.js"),
        ("/lib/a.js/", "lib/a.js"),
        ("///vendor/x.js", "vendor/x.js"),
        ("a.js", "a.js"),
    ])
    def test_strip_slashes(self, raw, expected):
        assert normalize_request_path(raw) == expected


class TestMatchesAny:
    def test_no_patterns(self):
        assert matches_any("a.js", []) is False

    def test_directory_glob(self):
        assert matches_any("vendor/raw.js", ["vendor/**"])
        assert not matches_any("lib/b.js", ["vendor/**"])

    def test_any_depth_prefix_matches_top_level(self):
        assert matches_any("app.min.js", ["**/*.min.js"])
        assert matches_any("lib/app.min.js", ["**/*.min.js"])

    def test_case_sensitive(self):
        assert not matches_any("Vendor/raw.js", ["vendor/**"])


class TestExclusionMatcher:
    def test_empty_matcher_is_falsy(self):
        matcher = ExclusionMatcher()
        assert not matcher
        assert matcher.is_excluded("/vendor/raw.js") is False

    def test_normalizes_before_matching(self):
        matcher = ExclusionMatcher(["vendor/**"])
        assert matcher
        assert matcher.is_excluded("/vendor/raw.js")
        assert matcher.is_excluded("/vendor/raw.js/")
        assert not matcher.is_excluded("/a.js")

    def test_patterns_copy(self):
        patterns = ["a.js"]
        matcher = ExclusionMatcher(patterns)
        patterns.append("b.js")
        assert matcher.patterns == ["a.js"]
