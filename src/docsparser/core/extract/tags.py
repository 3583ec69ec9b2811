"""Heading tag grammar: ` _macOS_ _Deprecated_` suffixes to DocumentationTag"""

import re

from docsparser.core.errors import DocsParseError
from docsparser.core.models import DocumentationTag


TAG_RE = re.compile(r' _([^_]+)_')

TAG_MAP: dict[str, DocumentationTag] = {
    'macOS':        DocumentationTag.OS_MACOS,
    'mas':          DocumentationTag.OS_MAS,
    'Windows':      DocumentationTag.OS_WINDOWS,
    'Linux':        DocumentationTag.OS_LINUX,
    'Experimental': DocumentationTag.STABILITY_EXPERIMENTAL,
    'Deprecated':   DocumentationTag.STABILITY_DEPRECATED,
    'Readonly':     DocumentationTag.AVAILABILITY_READONLY,
}


def parse_heading_tags(text: str | None) -> list[DocumentationTag]:
    """Return the tags found in text, in order; unknown tag names raise DocsParseError."""
    if not text:
        return []

    tags = []
    for match in TAG_RE.finditer(text):
        name = match.group(1)
        if name not in TAG_MAP:
            allowed = ','.join(f'"{t}"' for t in TAG_MAP)
            raise DocsParseError(f'heading tags must be from the allowlist: [{allowed}]')
        tags.append(TAG_MAP[name])
    return tags
