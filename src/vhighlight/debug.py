"""--debug span dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from vhighlight.tokens import Span, position_at


def dump_spans(source: str, spans: list[Span], *, file: TextIO = sys.stderr) -> None:
    """Print one line per span: line:column, offsets, category, text."""
    width = max((len(s.category.value) for s in spans), default=0)
    for span in spans:
        pos = position_at(source, span.start)
        file.write(
            f"{pos.line:>4}:{pos.column:<4} [{span.start}, {span.end}) "
            f"{span.category.value:<{width}} {span.text(source)!r}\n"
        )
