"""Pipeline step functions: discover, parse, and export orchestration"""

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, Optional, Sequence

from docsparser.core.export import write_api
from docsparser.core.extract.extract import DEFAULT_REPO_URL, DEFAULT_WEBSITE_URL, DocsParser
from docsparser.core.models import ParseRules
from docsparser.core.parse import discover_files, discover_readme
from docsparser.core.plugins import DocsParserPlugin


logger = logging.getLogger(__name__)


def run_parse(
    base_dir: Path,
    module_version: str,
    api_dir: str = 'docs/api',
    package_mode: str = 'single',
    use_readme: bool = False,
    file_list: Optional[Iterable[str]] = None,
    website_url: str = DEFAULT_WEBSITE_URL,
    repo_url: str = DEFAULT_REPO_URL,
    plugins: Sequence[DocsParserPlugin] = (),
    rules: Optional[ParseRules] = None,
    parser_config: str = 'gfm-like',
    ) -> list[dict]:
    """Discover documentation under base_dir and parse it into an ordered container list."""
    base_dir = Path(base_dir)
    if use_readme:
        api_files, structure_files = [discover_readme(base_dir)], []
    else:
        api_files, structure_files = discover_files(base_dir, api_dir, file_list)
    logger.info(
        "Parsing %d API file(s) and %d structure file(s) from %s",
        len(api_files), len(structure_files), base_dir,
    )

    parser = DocsParser(
        base_dir,
        module_version,
        api_files,
        structure_files,
        package_mode=package_mode,
        website_url=website_url,
        repo_url=repo_url,
        plugins=plugins,
        rules=rules,
        parser_config=parser_config,
    )
    containers = parser.parse()
    logger.info("Parsed %d container(s): %s", len(containers), dict(count_by_type(containers)))
    return containers


def count_by_type(containers: list[dict]) -> Counter:
    """Count containers per type (Module, Class, Element, Structure)."""
    return Counter(c['type'] for c in containers)


def run_build(
    base_dir: Path,
    module_version: str,
    output_dir: Path,
    out_file: str,
    **parse_options,
    ) -> tuple[Path, list[dict]]:
    """Parse base_dir and write the JSON API file. Returns (written_path, containers)."""
    containers = run_parse(base_dir, module_version, **parse_options)
    path = write_api(containers, output_dir, out_file)
    logger.info("Wrote %s", path)
    return path, containers
