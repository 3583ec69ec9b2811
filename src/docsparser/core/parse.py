"""File discovery, package version lookup, and markdown-it tokenization"""

import json
import os
from pathlib import Path
from typing import Iterable, Optional

from markdown_it import MarkdownIt

from docsparser.core.models import ParsedDoc


MD_EXTENSION = '.md'
STRUCTURES_DIR = 'structures'
README_FILE = 'README.md'
PACKAGE_FILE = 'package.json'


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _markdown_files(directory: Path, file_list: Optional[Iterable[str]] = None) -> list[Path]:
    """Return sorted *.md files directly inside directory, optionally limited to file_list names."""
    if not directory.is_dir():
        return []
    allowed = set(file_list) if file_list is not None else None
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix == MD_EXTENSION and (allowed is None or p.name in allowed)
    )


def discover_files(
    base_dir: Path,
    api_dir: str = 'docs/api',
    file_list: Optional[Iterable[str]] = None,
    ) -> tuple[list[Path], list[Path]]:
    """Return (api_files, structure_files) under base_dir/api_dir and its structures/ subdirectory."""
    api_path = Path(base_dir) / api_dir
    if not api_path.is_dir():
        raise FileNotFoundError(f"API docs directory not found: {api_path}")
    file_list = list(file_list) if file_list is not None else None
    return _markdown_files(api_path, file_list), _markdown_files(api_path / STRUCTURES_DIR, file_list)


def discover_readme(base_dir: Path) -> Path:
    """Return base_dir/README.md for single-file packages."""
    readme = Path(base_dir) / README_FILE
    if not readme.is_file():
        raise FileNotFoundError(f'{README_FILE} file not found')
    return readme


def resolve_version(base_dir: Path) -> str:
    """Read the version field of base_dir/package.json."""
    package_json = Path(base_dir) / PACKAGE_FILE
    if not package_json.is_file():
        raise FileNotFoundError(f"Expected a {PACKAGE_FILE} file to exist at path: {package_json}")
    try:
        data = json.loads(package_json.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {PACKAGE_FILE}: {e}") from e
    version = data.get('version') if isinstance(data, dict) else None
    if not version:
        raise ValueError(f"{package_json} has no version field")
    return str(version)


def relative_docs_path(path: Path, base_dir: Path) -> str:
    """Path of a doc relative to base_dir, POSIX separators, without extension."""
    return Path(os.path.relpath(path, base_dir)).with_suffix('').as_posix()


def parse_file(path: Path, base_dir: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Parse a single markdown file into a ParsedDoc with token stream."""
    path = Path(path)
    markdown = path.read_text(encoding='utf-8')
    return ParsedDoc(
        path=path,
        relative_docs_path=relative_docs_path(path, base_dir),
        slug=path.stem,
        markdown=markdown,
        tokens=make_parser(parser_config).parse(markdown),
    )
