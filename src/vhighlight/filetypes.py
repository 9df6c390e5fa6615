"""File association for V source and script files."""

from __future__ import annotations

from pathlib import Path

# .v sources, .vv templates, .vsh scripts
EXTENSIONS = (".v", ".vv", ".vsh")

LANGUAGE_ID = "v"


def is_v_source(path: str | Path) -> bool:
    """Return True if *path* has an extension this classifier handles."""
    return Path(path).suffix.lower() in EXTENSIONS
