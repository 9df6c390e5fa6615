"""Rule engine: greedy, single-pass classification of a buffer region."""

from __future__ import annotations

import logging

from vhighlight.patterns import DEFAULT_RULES, Pattern, PatternKind, RuleTable
from vhighlight.syntax import DEFAULT_SYNTAX, SyntaxTable
from vhighlight.tokens import Category, CharClass, Span

logger = logging.getLogger(__name__)


def classify(
    text: str,
    region: tuple[int, int] | None = None,
    rule_table: RuleTable | None = None,
    syntax_table: SyntaxTable | None = None,
) -> list[Span]:
    """Classify *text* within *region* and return ordered, non-overlapping spans.

    Comments and strings (per the syntax table) each become one span. The
    code between them is scanned with the rule table: the first rule that
    matches at an offset wins and scanning resumes after its capture group.
    Offsets no rule claims emit nothing. Never raises on any input text.
    """
    rules = DEFAULT_RULES if rule_table is None else rule_table
    syntax = DEFAULT_SYNTAX if syntax_table is None else syntax_table
    start, end = _clamp_region(text, region)

    spans: list[Span] = []
    pos = start
    enclosing = _enclosing_region(text, start, syntax) if start < end else None
    if enclosing is not None:
        # The region opens inside a comment or string that began earlier
        stop, category = enclosing
        spans.append(Span(start, min(stop, end), category))
        pos = stop
    # Openers that begin inside the region but extend past its end still count
    limit = min(end + len(syntax.comment_start) - 1, len(text))
    while pos < end:
        opening = min(syntax.next_opening(text, pos, limit), end)
        # Rule matches never reach into the following comment or string
        _scan_code(text, pos, opening, rules, syntax, spans)
        if opening == end:
            break
        delimited = syntax.delimited_at(text, opening, limit)
        assert delimited is not None
        stop, category = delimited
        stop = min(stop, end)
        spans.append(Span(opening, stop, category))
        pos = stop

    logger.debug("classified [%d, %d) into %d spans", start, end, len(spans))
    return spans


def _scan_code(
    text: str,
    pos: int,
    end: int,
    rules: RuleTable,
    syntax: SyntaxTable,
    spans: list[Span],
) -> None:
    """Append rule-table spans for the code segment [pos, end)."""
    while pos < end:
        for pattern in rules:
            extent = _match(pattern, text, pos, end, syntax)
            if extent is not None:
                group_start, group_end = extent
                spans.append(Span(group_start, group_end, pattern.category))
                pos = group_end
                break
        else:
            pos += 1


def _enclosing_region(
    text: str, offset: int, syntax: SyntaxTable
) -> tuple[int, Category] | None:
    """Return (stop, category) of the comment or string that *offset* falls inside.

    Walks delimited regions from the start of *text*, so the result is the
    same as for a whole-buffer pass.
    """
    pos = 0
    limit = min(offset + len(syntax.comment_start) - 1, len(text))
    while pos < offset:
        opening = syntax.next_opening(text, pos, limit)
        if opening >= offset:
            return None
        delimited = syntax.delimited_at(text, opening, len(text))
        assert delimited is not None
        stop, category = delimited
        if stop > offset:
            return stop, category
        pos = stop
    return None


def _clamp_region(text: str, region: tuple[int, int] | None) -> tuple[int, int]:
    if region is None:
        return 0, len(text)
    start, end = region
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    return start, end


def _match(
    pattern: Pattern, text: str, pos: int, end: int, syntax: SyntaxTable
) -> tuple[int, int] | None:
    """Return the extent *pattern* claims at *pos*, or None."""
    if pattern.kind is PatternKind.WORD_SET:
        return _match_word(pattern.words, text, pos, end, syntax)

    assert pattern.regex is not None
    m = pattern.regex.match(text, pos, end)
    if m is None:
        return None
    group_start, group_end = m.span(pattern.group)
    # Non-participating or empty groups claim nothing
    if group_start < 0 or group_end <= group_start:
        return None
    return group_start, group_end


def _match_word(
    words: frozenset[str], text: str, pos: int, end: int, syntax: SyntaxTable
) -> tuple[int, int] | None:
    """Match a complete word from *words* starting exactly at *pos*."""
    if syntax.char_class(text[pos]) is not CharClass.WORD:
        return None
    if pos > 0 and syntax.char_class(text[pos - 1]) is CharClass.WORD:
        return None
    stop = pos + 1
    while stop < end and syntax.char_class(text[stop]) is CharClass.WORD:
        stop += 1
    if text[pos:stop] in words:
        return pos, stop
    return None
