"""Slug and identifier helpers for documentation headings"""

import re


_WORD_RE = re.compile(r'[A-Z]{2,}(?=[A-Z][a-z]|[0-9]|\b)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+')


def slugify_heading(heading: str) -> str:
    """Convert a heading to its URL fragment (alphanumerics, spaces become hyphens)."""
    return re.sub(r'[^A-Za-z0-9 -]', '', heading).replace(' ', '-').lower()


def to_camel_case(text: str) -> str:
    """Convert text to camelCase ('BrowserWindow' -> 'browserWindow', 'web-contents' -> 'webContents')."""
    words = _WORD_RE.findall(text)
    if not words:
        return ''
    return words[0].lower() + ''.join(w[0].upper() + w[1:].lower() for w in words[1:])
