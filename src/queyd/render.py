"""Markdown rendering helpers.

Thin wrappers around Python-Markdown plus the heading extraction used to turn
a note's first ``# Heading`` into its title.
"""

from __future__ import annotations

import html
import re

import markdown

_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

# First top-level heading element, attributes allowed
_H1_RE = re.compile(r"<h1(?:\s[^>]*)?>(.*?)</h1>", re.DOTALL | re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
# A single wrapping paragraph: "<p>...</p>"
_PARAGRAPH_RE = re.compile(r"^<p(?:\s[^>]*)?>(.*)</p>$", re.DOTALL | re.IGNORECASE)


def render(text: str) -> str:
    """Render markdown *text* to HTML."""
    return markdown.markdown(text, extensions=_EXTENSIONS)


def strip_tags(fragment: str) -> str:
    """Drop HTML tags from *fragment* and unescape entities."""
    return html.unescape(_TAG_RE.sub("", fragment)).strip()


def extract_and_strip_leading_heading(rendered: str) -> tuple[str, str]:
    """Split *rendered* HTML into ``(heading_text, remaining_html)``.

    ``heading_text`` is the inner text of the first ``<h1>`` element, or ``""``
    when there is none.  The heading is removed from the remaining HTML, which
    is trimmed of surrounding whitespace and blank lines.
    """
    match = _H1_RE.search(rendered)
    if not match:
        return "", rendered.strip()
    remaining = rendered[: match.start()] + rendered[match.end() :]
    return strip_tags(match.group(1)), remaining.strip()


def unwrap_paragraph(line: str) -> str:
    """Remove a single wrapping ``<p>`` element from *line*, if present."""
    match = _PARAGRAPH_RE.match(line.strip())
    return match.group(1) if match else line
