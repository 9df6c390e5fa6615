"""Syntax table: character classes and comment/string region detection."""

from __future__ import annotations

from dataclasses import dataclass

from vhighlight.errors import ConfigError
from vhighlight.tokens import Category, CharClass, is_word_char


@dataclass(frozen=True, slots=True)
class SyntaxTable:
    """Per-character lexical roles that gate where rule patterns may match.

    Any string delimiter opens a string and the same character closes it.
    ``comment_start`` opens a line comment that runs up to ``comment_end``.
    """

    string_delimiters: str = "\"'`"
    comment_start: str = "//"
    comment_end: str = "\n"
    escape: str = "\\"

    def __post_init__(self) -> None:
        if not self.comment_start:
            raise ConfigError("comment opener must not be empty")
        if not self.comment_end:
            raise ConfigError("comment terminator must not be empty")
        for ch in self.string_delimiters:
            if is_word_char(ch):
                raise ConfigError(f"string delimiter {ch!r} is a word character")

    def char_class(self, ch: str) -> CharClass:
        """Return the lexical role of a single character."""
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        if ch in self.string_delimiters:
            return CharClass.STRING_DELIMITER
        if ch == self.escape:
            return CharClass.ESCAPE
        if ch in self.comment_end:
            return CharClass.COMMENT_DELIMITER
        if is_word_char(ch):
            return CharClass.WORD
        if ch.isspace():
            return CharClass.WHITESPACE
        return CharClass.PUNCTUATION

    def next_opening(self, text: str, pos: int, end: int) -> int:
        """Return the offset of the first comment or string opener in [pos, end), or *end*."""
        for i in range(pos, end):
            if text.startswith(self.comment_start, i, end):
                return i
            if text[i] in self.string_delimiters:
                return i
        return end

    def delimited_at(self, text: str, pos: int, end: int) -> tuple[int, Category] | None:
        """Return (stop, category) if a comment or string opens at *pos*, else None.

        Unterminated regions stop at *end*.
        """
        if text.startswith(self.comment_start, pos, end):
            stop = text.find(self.comment_end, pos + len(self.comment_start), end)
            return (end if stop == -1 else stop), Category.COMMENT

        quote = text[pos]
        if self.char_class(quote) is not CharClass.STRING_DELIMITER:
            return None

        i = pos + 1
        while i < end:
            ch = text[i]
            if self.escape and ch == self.escape:
                i += 2
                continue
            i += 1
            if ch == quote:
                break
        return min(i, end), Category.STRING


DEFAULT_SYNTAX = SyntaxTable()
