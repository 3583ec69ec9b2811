"""Convert tokenized documentation files into API containers"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from docsparser.core.errors import DocsParseError, extend_error
from docsparser.core.extract.blocks import (
    heading_to_method_block,
    parse_event_blocks,
    parse_method_blocks,
    parse_property_blocks,
)
from docsparser.core.extract.join import safely_join_tokens
from docsparser.core.extract.sections import (
    find_constructor_header,
    find_content_after_heading_close,
    find_content_after_list,
    find_content_inside_header,
    find_next_list,
    find_process,
    get_content_before_first_heading_matching,
    headings_and_content,
)
from docsparser.core.extract.typed_keys import convert_list_to_typed_keys
from docsparser.core.extract.types import typed_key_to_property
from docsparser.core.models import ParsedDoc, ParsedDocumentation, ParseRules
from docsparser.core.parse import parse_file
from docsparser.core.plugins import DocsParserPlugin
from docsparser.core.utils.slug import to_camel_case


logger = logging.getLogger(__name__)

DEFAULT_WEBSITE_URL = 'https://electronjs.org/docs/api'
DEFAULT_REPO_URL = 'https://github.com/electron/electron/blob/v{{VERSION}}'

STRUCTURE_HEADING_RE = re.compile(r' Object(?: extends `(.+?)`)?$')
CLASS_EXTENDS_RE = re.compile(r' extends `(.+?)`')
ELEMENT_TAG_RE = re.compile(r'<(.+?)>')

CLASS_PREFIX = 'Class: '
DRAFT_SUFFIX = '(Draft)'
ELEMENT_SUFFIX = '` Tag'

# headings that end the free-form module description
MODULE_SECTION_HEADINGS = {'Methods', 'Properties', 'Events', 'Tag Attributes', 'DOM Events'}


@dataclass
class BaseContainerInfo:
    """A top-level heading recognised as a container, with the tokens it bounds."""
    container:  dict
    tokens:     list
    is_class:   bool = False
    is_element: bool = False


class DocsParser:
    """Parse API and structure documentation files into an ordered list of containers."""

    def __init__(
        self,
        base_dir: Path,
        module_version: str,
        api_files: Sequence[Path],
        structure_files: Sequence[Path],
        package_mode: str = 'single',
        website_url: str = DEFAULT_WEBSITE_URL,
        repo_url: str = DEFAULT_REPO_URL,
        plugins: Sequence[DocsParserPlugin] = (),
        rules: Optional[ParseRules] = None,
        parser_config: str = 'gfm-like',
        ):
        if package_mode not in ('single', 'multi'):
            raise ValueError(f'package_mode must be "single" or "multi", got "{package_mode}"')
        self.base_dir = Path(base_dir)
        self.module_version = module_version
        self.api_files = [Path(p) for p in api_files]
        self.structure_files = [Path(p) for p in structure_files]
        self.package_mode = package_mode
        self.website_url = website_url.rstrip('/')
        self.repo_url = repo_url.rstrip('/')
        self.plugins = list(plugins)
        self.rules = rules or ParseRules()
        self.parser_config = parser_config

    # --- base containers ---

    def _base_container(self, doc: ParsedDoc, name: str, description: str) -> dict:
        container = {
            'name': name,
            'description': description,
            'slug': doc.slug,
            'websiteUrl': f'{self.website_url}/{doc.slug}',
            'repoUrl': f"{self.repo_url.replace('{{VERSION}}', self.module_version)}/{doc.relative_docs_path}.md",
            'version': self.module_version,
        }
        for plugin in self.plugins:
            container.update(plugin.extend_container(container, doc.relative_docs_path) or {})
        return container

    def parse_base_containers(self, doc: ParsedDoc) -> list[BaseContainerInfo]:
        """Find the module/structure heading and every class heading of a file."""
        is_structure = 'structures' in doc.relative_docs_path
        headings = headings_and_content(doc.tokens)
        if not headings:
            raise DocsParseError(f'File "{doc.path}" does not have a top level heading, this is required')

        infos: list[BaseContainerInfo] = []
        for heading in headings:
            is_top_level = heading.level == 1 and not infos
            is_class = heading.level == 2 and heading.heading.startswith(CLASS_PREFIX) and not is_top_level
            if not (is_top_level or is_class):
                continue
            if is_top_level and heading.heading.endswith(DRAFT_SUFFIX):
                logger.debug("Skipping draft documentation: %s", doc.path)
                return []

            name = heading.heading
            extends = None
            is_element = False
            if is_structure:
                match = STRUCTURE_HEADING_RE.search(name)
                if not match:
                    raise DocsParseError(
                        f'Structure doc files top level heading should end with " Object", got "{name}"'
                    )
                name, extends = name[:match.start()], match.group(1)
                description = safely_join_tokens(find_content_after_list(doc.tokens))
            elif is_class:
                name = name[len(CLASS_PREFIX):]
                match = CLASS_EXTENDS_RE.search(name)
                if match:
                    name, extends = name[:match.start()], match.group(1)
                description = safely_join_tokens(
                    find_content_after_heading_close(heading.content), parse_code_fences=True,
                )
            else:
                if name.endswith(ELEMENT_SUFFIX):
                    tag = ELEMENT_TAG_RE.search(name)
                    if not tag:
                        raise DocsParseError(f'Element heading should name a <tag>, got "{name}"')
                    name = f'{tag.group(1)}Tag'
                    extends = 'HTMLElement'
                    is_element = True
                description = self._module_description(doc.tokens)

            container = self._base_container(doc, name, description)
            if extends:
                container['extends'] = extends
            infos.append(BaseContainerInfo(
                container=container,
                tokens=heading.content,
                is_class=is_class,
                is_element=is_element,
            ))
        return infos

    @staticmethod
    def _module_description(tokens: list) -> str:
        """Join the prose before the first member section; later groups keep a ### heading."""
        groups = get_content_before_first_heading_matching(
            tokens,
            lambda h: h.strip() in MODULE_SECTION_HEADINGS or h.startswith(CLASS_PREFIX),
        )
        parts = []
        for i, group in enumerate(groups):
            text = safely_join_tokens(find_content_after_heading_close(group.content), parse_code_fences=True)
            parts.append(text if i == 0 else f'### {group.heading}\n\n{text}')
        return '\n\n'.join(p for p in parts if p).strip()

    # --- API files ---

    def _extend_api(self, api: dict, tokens: list) -> dict:
        for plugin in self.plugins:
            api.update(plugin.extend_api(api, tokens) or {})
        return api

    def _class_container(self, info: BaseContainerInfo) -> dict:
        tokens = info.tokens
        container = info.container

        # instance name comes from an example member heading (`win.close()`), else the class name
        level_four = next((h for h in headings_and_content(tokens) if h.level == 4), None)
        instance_name = ''
        if level_four:
            parts = level_four.heading.split('`')
            instance_name = parts[1].split('.')[0] if len(parts) > 1 else ''
        instance_name = instance_name or to_camel_case(container['name'])

        constructor = heading_to_method_block(find_constructor_header(tokens), is_constructor=True, rules=self.rules)
        return {
            **container,
            'type': 'Class',
            'process': find_process(tokens),
            'constructorMethod': (
                {'signature': constructor['signature'], 'parameters': constructor['parameters']}
                if constructor else None
            ),
            'staticMethods': parse_method_blocks(find_content_inside_header(tokens, 'Static Methods', 3), self.rules),
            'staticProperties': parse_property_blocks(find_content_inside_header(tokens, 'Static Properties', 3), self.rules),
            'instanceMethods': parse_method_blocks(find_content_inside_header(tokens, 'Instance Methods', 3), self.rules),
            'instanceProperties': parse_property_blocks(find_content_inside_header(tokens, 'Instance Properties', 3), self.rules),
            'instanceEvents': parse_event_blocks(find_content_inside_header(tokens, 'Instance Events', 3), self.rules),
            'instanceName': instance_name,
        }

    def _element_container(self, info: BaseContainerInfo) -> dict:
        tokens = info.tokens
        return {
            **info.container,
            'type': 'Element',
            'process': find_process(tokens),
            'methods': parse_method_blocks(find_content_inside_header(tokens, 'Methods', 2), self.rules),
            'properties': parse_property_blocks(find_content_inside_header(tokens, 'Tag Attributes', 2), self.rules),
            'events': parse_event_blocks(find_content_inside_header(tokens, 'DOM Events', 2), self.rules),
        }

    def _module_container(self, info: BaseContainerInfo) -> dict:
        tokens = info.tokens
        return {
            **info.container,
            'type': 'Module',
            'process': find_process(tokens),
            'methods': parse_method_blocks(find_content_inside_header(tokens, 'Methods', 2), self.rules),
            'properties': parse_property_blocks(find_content_inside_header(tokens, 'Properties', 2), self.rules),
            'events': parse_event_blocks(find_content_inside_header(tokens, 'Events', 2), self.rules),
            'exportedClasses': [],
        }

    def parse_api_file(self, doc: ParsedDoc) -> list[dict]:
        """Return the Module, Class and Element containers declared in one file."""
        parsed: list[dict] = []
        for info in self.parse_base_containers(doc):
            if info.is_class:
                api = self._extend_api(self._class_container(info), info.tokens)
                if self.package_mode == 'single':
                    parsed.append(api)
                    continue
                module = next((c for c in reversed(parsed) if c['type'] == 'Module'), None)
                if module is None:
                    raise DocsParseError(
                        f'Classes in multi package mode must follow a module heading, '
                        f'found class "{api["name"]}" with no module before it'
                    )
                module['exportedClasses'].append(api)
            elif info.is_element:
                parsed.append(self._extend_api(self._element_container(info), info.tokens))
            else:
                parsed.append(self._extend_api(self._module_container(info), info.tokens))
        return parsed

    # --- structure files ---

    def parse_structure(self, doc: ParsedDoc) -> Optional[dict]:
        """Return the single Structure container of a structures/ file, or None for a draft."""
        infos = self.parse_base_containers(doc)
        if not infos:
            return None
        if len(infos) != 1:
            raise DocsParseError('struct files should only contain one structure per file')

        list_tokens = find_next_list(infos[0].tokens)
        if list_tokens is None:
            raise DocsParseError(f'Structure file {doc.path} has no property list')

        return {
            **infos[0].container,
            'type': 'Structure',
            'properties': [
                typed_key_to_property(k)
                for k in convert_list_to_typed_keys(list_tokens, self.rules).take()
            ],
        }

    # --- entrypoint ---

    def _load(self, path: Path) -> ParsedDoc:
        return parse_file(path, self.base_dir, self.parser_config)

    def parse(self) -> list[dict]:
        """Parse every API file then every structure file; the first failure aborts the run."""
        docs = ParsedDocumentation()

        for path in self.api_files:
            try:
                containers = self.parse_api_file(self._load(path))
            except (ValueError, OSError) as e:
                raise extend_error(f'An error occurred while processing: "{path}"', e) from e
            logger.debug("Parsed %s: %d container(s)", path, len(containers))
            docs.add_api_containers(*containers)

        for path in self.structure_files:
            try:
                structure = self.parse_structure(self._load(path))
            except (ValueError, OSError) as e:
                raise extend_error(f'An error occurred while processing: "{path}"', e) from e
            logger.debug("Parsed structure %s", path)
            if structure is not None:
                docs.add_structure(structure)

        return docs.get_json()
