"""Outline extraction: declaration sites and TODO markers, independent of the rule table."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from vhighlight.errors import PatternError
from vhighlight.patterns import compile_regex

_NAME = r"([A-Za-z_]\w*)"
_PUB = r"^[ \t]*(?:pub[ \t]+)?"

# (kind, regex, capture group)
OUTLINE_PATTERNS: tuple[tuple[str, str, int], ...] = (
    ("function", _PUB + r"fn[ \t]+(?:\([^)\n]*\)[ \t]*)?" + _NAME, 1),
    ("struct", _PUB + r"struct[ \t]+" + _NAME, 1),
    ("interface", _PUB + r"interface[ \t]+" + _NAME, 1),
    ("type", _PUB + r"type[ \t]+" + _NAME, 1),
    ("enum", _PUB + r"enum[ \t]+" + _NAME, 1),
    ("module", r"^[ \t]*module[ \t]+" + _NAME, 1),
    ("todo", r"//[ \t]*((?:TODO|FIXME|XXX|HACK)\b.*?)[ \t]*$", 1),
)


@dataclass(frozen=True, slots=True)
class OutlineEntry:
    """A navigable outline item: what it is, its label, and where it starts."""

    kind: str
    label: str
    offset: int


def extract_outline(
    source: str, patterns: Sequence[tuple[str, str, int]] = OUTLINE_PATTERNS
) -> list[OutlineEntry]:
    """Run each anchored line pattern over *source* and return entries by offset."""
    compiled: list[tuple[str, re.Pattern[str], int]] = []
    for kind, regex, group in patterns:
        pattern = compile_regex(kind, regex, re.MULTILINE)
        if not 0 <= group <= pattern.groups:
            raise PatternError(
                f"capture group {group} out of range (pattern has {pattern.groups})",
                regex,
                kind,
            )
        compiled.append((kind, pattern, group))

    entries: list[OutlineEntry] = []
    for kind, regex, group in compiled:
        for m in regex.finditer(source):
            if m.group(group) is None:
                continue
            entries.append(OutlineEntry(kind, m.group(group), m.start(group)))

    entries.sort(key=lambda e: (e.offset, e.kind))
    return entries
