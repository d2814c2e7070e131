"""
Read-only HTML rendering for journal text.

Entries are plain text with a tiny line-oriented markup:

    # Title / ## Subtitle / ### Section
    - [ ] open task
    - [x] finished task
    {https://example.com/photo.png}   inline image
    bare links such as example.com/notes are turned into anchors

Each line is handled on its own; the first rule that matches wins.
"""

from __future__ import annotations

import re
from html import escape
from typing import Optional

HOLIDAY_FLAG = "__IS_HOLIDAY__"
HOLIDAY_BANNER = '<div class="holiday">\U0001F389 Today was a Holiday!</div>'

UNCHECKED_RE = re.compile(r"^- \[ \]\s?")
CHECKED_RE = re.compile(r"^- \[x\]\s?", re.IGNORECASE)
HEADING_RE = re.compile(r"^(#{1,3})\s+(.*)$")
IMAGE_RE = re.compile(r"\{(https?:[^\s{}]+\.(?:jpg|jpeg|png|gif))\}", re.IGNORECASE)
URL_RE = re.compile(r"(?:https?://)?[\w.-]+\.[a-z]{2,}\S*", re.IGNORECASE)
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def _checkbox(label: str, *, checked: bool, editable: bool) -> str:
    attrs = ['type="checkbox"']
    if checked:
        attrs.append("checked")
    if not editable:
        attrs.append("disabled")
    css = "checklist-item done" if checked else "checklist-item"
    return f'<div class="{css}"><input {" ".join(attrs)} />{escape(label)}</div>'


def _image(url: str) -> str:
    return f'<img src="{escape(url)}" alt="img" class="entry-image" />'


def _link(text: str) -> str:
    href = text if SCHEME_RE.match(text) else f"https://{text}"
    return (
        f'<a href="{escape(href)}" class="entry-link" target="_blank" '
        f'rel="noopener noreferrer">{escape(text)}</a>'
    )


def _substitute(line: str, pattern: re.Pattern, build) -> str:
    """Escape ``line``, replacing each match of ``pattern`` with ``build(match)``."""
    parts = []
    last = 0
    for match in pattern.finditer(line):
        parts.append(escape(line[last : match.start()]))
        parts.append(build(match))
        last = match.end()
    parts.append(escape(line[last:]))
    return "".join(parts)


def render_line(line: str, *, editable: bool = False) -> str:
    trimmed = line.strip()

    if UNCHECKED_RE.match(trimmed):
        label = UNCHECKED_RE.sub("", trimmed, count=1)
        return _checkbox(label, checked=False, editable=editable)
    if CHECKED_RE.match(trimmed):
        label = CHECKED_RE.sub("", trimmed, count=1)
        return _checkbox(label, checked=True, editable=editable)

    heading = HEADING_RE.match(trimmed)
    if heading:
        level = len(heading.group(1))
        return f"<h{level}>{escape(heading.group(2))}</h{level}>"

    if IMAGE_RE.search(trimmed):
        body = _substitute(trimmed, IMAGE_RE, lambda m: _image(m.group(1)))
        return f"<div>{body}</div>"

    body = _substitute(trimmed, URL_RE, lambda m: _link(m.group(0)))
    return f"<p>{body}</p>"


def render_content(
    text: Optional[str], *, section: Optional[str] = None, editable: bool = False
) -> str:
    """
    Render stored entry text as an HTML fragment.

    ``section`` only matters for the school log, where a text consisting of
    the holiday marker is shown as a banner. Checkboxes are disabled unless
    ``editable`` is set.
    """
    if not text:
        return ""
    if section == "school" and text.strip() == HOLIDAY_FLAG:
        return HOLIDAY_BANNER
    return "\n".join(render_line(line, editable=editable) for line in text.split("\n"))
