"""Lexical classification of V source code for syntax highlighting."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vhighlight.keywords import KeywordConfig
    from vhighlight.tokens import Span

__version__ = "0.1.0"


def highlight(
    source: str,
    region: tuple[int, int] | None = None,
    config: KeywordConfig | None = None,
) -> list[Span]:
    """Classify V source (or a region of it) and return ordered spans."""
    from vhighlight.engine import classify
    from vhighlight.patterns import compile_config

    rules = compile_config(config) if config is not None else None
    return classify(source, region, rules)
