from __future__ import annotations

"""
Unit tests for the Scope Matching Service.

Verifies exact matching, segment-bounded longest-prefix selection and scope
root normalization.
"""

import pytest

from autonavbar.core.services.matcher import determine_scope, match_scope


def test_exact_match_wins_over_longer_prefix() -> None:
    keys = ["/2024/", "/2024/autumn-term/index.html"]
    assert match_scope("/2024/autumn-term/index.html", keys) == "/2024/autumn-term/index.html"


def test_exact_match_ignores_trailing_separator() -> None:
    assert match_scope("/2024/autumn-term", ["/2024/autumn-term/"]) == "/2024/autumn-term/"


def test_longest_prefix_wins() -> None:
    keys = ["/2024/", "/2024/autumn-term/", "/"]
    assert match_scope("/2024/autumn-term/weeks/week01/lecture.html", keys) == "/2024/autumn-term/"
    assert match_scope("/2024/spring/index.html", keys) == "/2024/"
    assert match_scope("/about.html", keys) == "/"


def test_prefix_must_end_on_segment_boundary() -> None:
    """A key sharing a numeric prefix with an unrelated directory must not match."""
    assert match_scope("/2015/index.html", ["/201"]) is None
    assert match_scope("/201/index.html", ["/201"]) == "/201"


def test_no_match_returns_none() -> None:
    assert match_scope("/blog/post.html", ["/2024/", "/docs/"]) is None
    assert match_scope("/blog/post.html", []) is None


def test_keys_are_normalized_before_comparison() -> None:
    assert match_scope("/docs/intro.html", ["docs//"]) == "docs//"


@pytest.mark.parametrize("key, expected", [
    ("/2024/autumn-term", "/2024/autumn-term/"),
    ("/2024/autumn-term//", "/2024/autumn-term/"),
    ("2024", "/2024/"),
    ("/", "/"),
    ("/2024/index.html", "/2024/index.html"),
])
def test_determine_scope(key: str, expected: str) -> None:
    assert determine_scope(key) == expected
