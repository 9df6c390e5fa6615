"""Error types with formatted context."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when a keyword set or syntax table is empty or malformed."""

    def __init__(self, message: str, name: str | None = None) -> None:
        self.message = message
        self.name = name
        super().__init__(self.format())

    def format(self) -> str:
        if self.name is None:
            return f"error: {self.message}"
        return f"error: {self.message}\n  --> keyword class '{self.name}'"


class PatternError(Exception):
    """Raised when a rule pattern fails to compile, with the pattern text underlined."""

    def __init__(
        self,
        message: str,
        pattern: str,
        name: str | None = None,
        index: int | None = None,
    ) -> None:
        self.message = message
        self.pattern = pattern
        self.name = name
        self.index = index
        super().__init__(self.format())

    def format(self) -> str:
        # Regex text is shown as a single source line; index is 0-based
        col = 1 if self.index is None else self.index + 1
        source_line = self.pattern.replace("\n", " ")
        underline_len = 1 if self.index is not None else max(1, len(source_line))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        gutter_width = 2
        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{1:>{gutter_width - 1}} |"

        label = f"pattern '{self.name}'" if self.name else "pattern"
        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {label}:1:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )
