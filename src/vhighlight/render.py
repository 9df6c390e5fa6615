"""HTML renderer: wraps classified spans in CSS-classed <span> elements."""

from __future__ import annotations

import html
import re

from vhighlight.tokens import Span

CSS_PREFIX = "v-"


def render(source: str, spans: list[Span], *, standalone: bool = False) -> str:
    """Render *source* as a <pre> block, one <span> per classified span.

    Unclassified text is emitted escaped and unwrapped. With *standalone*,
    the block is wrapped in a minimal HTML document.
    """
    parts: list[str] = ['<pre class="v-source"><code>']
    pos = 0
    for span in spans:
        if span.start > pos:
            parts.append(_escape_html(source[pos : span.start]))
        css = html.escape(CSS_PREFIX + span.category.value)
        parts.append(f'<span class="{css}">{_escape_html(span.text(source))}</span>')
        pos = span.end
    if pos < len(source):
        parts.append(_escape_html(source[pos:]))
    parts.append("</code></pre>\n")

    block = "".join(parts)
    if not standalone:
        return block
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8">\n'
        "</head>\n"
        "<body>\n"
        f"{block}"
        "</body>\n"
        "</html>\n"
    )


_MARKUP = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;"})
_NON_ASCII = re.compile(r"[^\x00-\x7f]")


def _escape_html(text: str) -> str:
    """Escape markup characters and write non-ASCII as hex character references."""
    return _NON_ASCII.sub(lambda m: f"&#x{ord(m.group()):X};", text.translate(_MARKUP))
