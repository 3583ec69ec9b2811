"""Token-range scanners: lists, heading groups, and bounded content ranges"""

from typing import Callable, Optional

from docsparser.core.errors import DocsParseError
from docsparser.core.extract.join import safely_join_tokens
from docsparser.core.models import HeadingGroup, ProcessAvailability
from docsparser.core.utils.tokens import find_index, heading_level


PROCESS_NAMES = {'Main': 'main', 'Renderer': 'renderer', 'Utility': 'utility'}
NOT_EXPORTED_NOTE = 'This class is not exported'


def _dangling_heading_end(tokens: list) -> int:
    """Return the index just past a heading_close that precedes any heading_open, else 0."""
    first_open = find_index(tokens, 'heading_open')
    first_close = find_index(tokens, 'heading_close')
    if first_close != -1 and (first_open == -1 or first_close < first_open):
        return first_close + 1
    return 0


def _until_next_heading(tokens: list, start: int = 0) -> list:
    end = find_index(tokens, 'heading_open', start)
    return tokens[start:] if end == -1 else tokens[start:end]


def find_next_list(tokens: list) -> Optional[list]:
    """Return the first bullet list (open through matching close), or None if absent or unterminated."""
    start = find_index(tokens, 'bullet_list_open')
    if start == -1:
        return None
    depth = 0
    for i in range(start, len(tokens)):
        if tokens[i].type == 'bullet_list_open':
            depth += 1
        elif tokens[i].type == 'bullet_list_close':
            depth -= 1
        if depth == 0:
            return tokens[start:i + 1]
    return None


def find_first_heading(tokens: list):
    """Return the inline token holding the text of the first heading."""
    start = find_index(tokens, 'heading_open')
    if start == -1:
        raise DocsParseError("expected to find a heading token but couldn't")
    if start + 2 >= len(tokens) or tokens[start + 2].type != 'heading_close':
        raise DocsParseError('expected the first heading to be closed immediately after its text')
    return tokens[start + 1]


def headings_and_content(tokens: list) -> list[HeadingGroup]:
    """Group every heading with the tokens it bounds, flat and in document order."""
    groups: list[HeadingGroup] = []
    for start, token in enumerate(tokens):
        level = heading_level(token)
        if level is None:
            continue
        close = next(
            (i for i in range(start + 1, len(tokens))
             if tokens[i].type == 'heading_close' and tokens[i].level == token.level),
            None,
        )
        if close is None:
            raise DocsParseError(f'Unterminated heading at token {start}')

        heading_tokens = tokens[start + 1:close]
        content = tokens[close + 1:]
        end = next(
            (i for i, t in enumerate(content) if t.type == 'heading_open' and heading_level(t) <= level),
            len(content),
        )
        groups.append(HeadingGroup(
            heading=safely_join_tokens(heading_tokens).strip(),
            level=level,
            heading_tokens=heading_tokens,
            content=content[:end],
        ))
    return groups


def find_constructor_header(tokens: list) -> Optional[HeadingGroup]:
    """Return the level 3 `new Foo(...)` heading group, else None."""
    return next(
        (g for g in headings_and_content(tokens) if g.heading.startswith('`new ') and g.level == 3),
        None,
    )


def find_content_inside_header(tokens: list, expected_header: str, expected_level: int) -> Optional[list]:
    """Return the content of the heading with exactly this text and level, else None."""
    group = next(
        (g for g in headings_and_content(tokens) if g.heading == expected_header and g.level == expected_level),
        None,
    )
    return group.content if group else None


def find_content_after_list(tokens: list, return_all_on_no_list: bool = False) -> list:
    """Return the tokens after the first top-level list, up to the next heading.

    With no list: [] by default, or everything up to the next heading when
    return_all_on_no_list is set.
    """
    depth = 0
    seen_list = False
    start = -1
    for i, token in enumerate(tokens):
        if token.type == 'bullet_list_open':
            depth += 1
            seen_list = True
        elif token.type == 'bullet_list_close':
            depth -= 1
        if seen_list and depth == 0:
            start = i + 1
            break

    if start == -1:
        if not return_all_on_no_list:
            return []
        start = _dangling_heading_end(tokens)
    return _until_next_heading(tokens, start)


def find_content_after_heading_close(tokens: list) -> list:
    """Return the tokens up to the next heading, skipping a dangling heading_close at the start."""
    return _until_next_heading(tokens, _dangling_heading_end(tokens))


def get_content_before_constructor(tokens: list) -> list[HeadingGroup]:
    """Return the heading groups preceding the constructor heading; [] without one."""
    groups = headings_and_content(tokens)
    for i, group in enumerate(groups):
        if group.heading.startswith('`new ') and group.level == 3:
            return groups[:i]
    return []


def get_content_before_first_heading_matching(
    tokens: list,
    matcher: Callable[[str], bool],
    ) -> list[HeadingGroup]:
    """Return the heading groups preceding the first heading matcher accepts (all groups if none do)."""
    groups = headings_and_content(tokens)
    for i, group in enumerate(groups):
        if matcher(group.heading):
            return groups[:i]
    return groups


def find_process(tokens: list) -> ProcessAvailability:
    """Parse a "Process: [Main](..), [Renderer](..)" annotation.

    Without one the API is available everywhere and not specially exported.
    """
    for token in tokens:
        if token.type != 'inline' or not (
            token.content.startswith('Process') or token.content.startswith('Exported in')
        ):
            continue
        procs: ProcessAvailability = {'main': False, 'renderer': False, 'utility': False, 'exported': True}
        in_link = False
        for child in token.children or []:
            if child.type == 'link_open':
                in_link = True
            elif child.type == 'link_close':
                in_link = False
            elif child.type == 'text':
                if in_link and child.content in PROCESS_NAMES:
                    procs[PROCESS_NAMES[child.content]] = True
                if NOT_EXPORTED_NOTE in child.content:
                    procs['exported'] = False
        return procs
    return {'main': True, 'renderer': True, 'utility': True, 'exported': False}
