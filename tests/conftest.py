"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from vhighlight.engine import classify
from vhighlight.tokens import Category, Span


@pytest.fixture
def hl():
    """Return a helper that classifies source and returns (text, category) pairs."""

    def _hl(source: str, **kwargs) -> list[tuple[str, Category]]:
        return [(s.text(source), s.category) for s in classify(source, **kwargs)]

    return _hl


def assert_pairs(pairs: list[tuple[str, Category]], expected: list[tuple[str, Category]]) -> None:
    """Assert that the classified (text, category) pairs match exactly."""
    assert pairs == expected, f"Expected {expected}, got {pairs}"


def category_of(pairs: list[tuple[str, Category]], text: str) -> Category:
    """Return the category of the first span whose text is *text*."""
    for t, c in pairs:
        if t == text:
            return c
    raise AssertionError(f"no span with text {text!r} in {pairs}")


def assert_well_formed(spans: list[Span]) -> None:
    """Assert spans are non-empty, strictly ordered and non-overlapping."""
    for span in spans:
        assert span.start < span.end, f"empty span {span}"
    for a, b in zip(spans, spans[1:]):
        assert a.end <= b.start, f"overlap or disorder: {a} then {b}"
