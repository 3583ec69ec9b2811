"""Data models for the extraction pipeline and the emitted API schema"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypedDict

from docsparser.core.errors import DocsParseError


class DocumentationTag(str, Enum):
    OS_MACOS = 'os_macos'
    OS_MAS = 'os_mas'
    OS_WINDOWS = 'os_windows'
    OS_LINUX = 'os_linux'
    STABILITY_EXPERIMENTAL = 'stability_experimental'
    STABILITY_DEPRECATED = 'stability_deprecated'
    AVAILABILITY_READONLY = 'availability_readonly'


# --- emitted schema (plain dicts so plugins and json.dumps see plain data) ---

# TypeInformation is a dict discriminated by its "type" key; every variant
# carries "collection". Variant-specific keys: parameters/returns (Function),
# properties (Object), possibleValues (String), eventProperties or
# eventPropertiesReference (Event), innerTypes (generics). A union stores a
# list of TypeInformation under "type".
TypeInformation = dict[str, Any]


class PossibleStringValue(TypedDict):
    value: str
    description: str


class ProcessAvailability(TypedDict):
    main: bool
    renderer: bool
    utility: bool
    exported: bool


class GuessedParam(TypedDict):
    name: str
    optional: bool


class BaseContainer(TypedDict, total=False):
    name: str
    description: str
    slug: str
    websiteUrl: str
    repoUrl: str
    version: str
    extends: str


# --- internal extraction state ---

@dataclass
class HeadingGroup:
    """A heading plus the tokens it bounds (up to the next heading of equal or lower level)."""
    heading:        str
    level:          int
    heading_tokens: list
    content:        list        # starts right after this heading's heading_close


@dataclass
class ListItem:
    tokens:      list
    nested_list: Optional['NestedList'] = None


@dataclass
class NestedList:
    items: list[ListItem] = field(default_factory=list)


@dataclass
class TypedKey:
    """One `key` type - description entry of a parameter/property list."""
    key:             str
    type:            TypeInformation
    description:     str
    required:        bool
    additional_tags: list[DocumentationTag] = field(default_factory=list)


class TypedKeyList:
    """Single-use owner of a typed key list; the first take() wins."""

    def __init__(self, keys: list[TypedKey]):
        self._keys = keys
        self.consumed = False

    @property
    def keys(self) -> list[TypedKey]:
        """Peek at the keys without consuming them."""
        return self._keys

    @property
    def available(self) -> bool:
        return not self.consumed

    def take(self) -> list[TypedKey]:
        if self.consumed:
            raise DocsParseError('Attempted to consume a typed keys list that has already been consumed')
        self.consumed = True
        return self._keys

    def __repr__(self) -> str:
        return f"TypedKeyList(keys={len(self._keys)}, consumed={self.consumed})"


@dataclass(frozen=True)
class ParseRules:
    """Configurable authoring lint rules applied during type parsing."""
    lowercase_primitives: bool = False     # reject Boolean / Number / String


@dataclass
class ParsedDoc:
    """A tokenized documentation file; not persisted."""
    path:               Path
    relative_docs_path: str     # path relative to the base dir, without extension
    slug:               str
    markdown:           str
    tokens:             list    # markdown-it Token objects


class ParsedDocumentation:
    """Ordered collection of parsed containers; modules with no members are dropped on output."""

    def __init__(self):
        self._containers: list[dict] = []

    def add_structure(self, structure: dict) -> None:
        self._containers.append(structure)

    def add_api_containers(self, *containers: dict) -> None:
        self._containers.extend(containers)

    def get_json(self) -> list[dict]:
        return [c for c in self._containers if not _is_empty_module(c)]


def _is_empty_module(container: dict) -> bool:
    if container.get('type') != 'Module':
        return False
    members = ('methods', 'properties', 'events', 'exportedClasses')
    return not any(container.get(m) for m in members)
