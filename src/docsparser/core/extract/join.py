"""Deterministic reconstruction of documentation prose from markdown-it tokens"""

from docsparser.core.errors import DocsParseError


JOINABLE_TOKEN_TYPES = frozenset({
    'text',
    'link_open',
    'link_close',
    'softbreak',
    'hardbreak',
    'code_inline',
    'html_inline',
    'strong_open',
    'strong_close',
    'em_open',
    'em_close',
    's_open',
    's_close',
    'paragraph_open',
    'paragraph_close',
    'bullet_list_open',
    'bullet_list_close',
    'list_item_open',
    'list_item_close',
    'blockquote_open',
    'blockquote_close',
    'fence',
})

MARKUP_TOKEN_TYPES = frozenset({
    'strong_open', 'strong_close', 'em_open', 'em_close', 's_open', 's_close',
})


def safely_join_tokens(tokens: list, parse_code_fences: bool = False) -> str:
    """Rebuild the prose represented by tokens.

    Emphasis, strikethrough and code span markup is kept so later passes can
    re-parse it; lists are rendered with "* " bullets indented two spaces per
    level. Code fences are dropped unless parse_code_fences is set. Any token
    type outside JOINABLE_TOKEN_TYPES raises DocsParseError.
    """
    joined = ''
    list_level = -1
    for token in tokens:
        if token.type == 'inline' and token.children is not None:
            joined += safely_join_tokens(token.children, parse_code_fences)
            continue
        if token.children:
            raise DocsParseError('There should be no nested children in the joinable tokens')
        if token.type not in JOINABLE_TOKEN_TYPES:
            raise DocsParseError(
                f'Unsupported markdown token "{token.type}" in joinable tokens; only plain text, links, '
                'softbreaks, inline code, emphasis, lists, blockquotes, code fences and paragraphs are supported'
            )

        if token.type == 'softbreak':
            joined += ' '
        elif token.type == 'hardbreak':
            joined += '\n'
        elif token.type == 'code_inline':
            joined += f'{token.markup}{token.content}{token.markup}'
        elif token.type == 'blockquote_open':
            joined += f'{token.markup} '
        elif token.type in MARKUP_TOKEN_TYPES:
            joined += token.markup
        elif token.type in ('text', 'link_open', 'link_close', 'html_inline'):
            joined += token.content
        elif token.type == 'paragraph_close':
            joined += '\n\n'
        elif token.type == 'list_item_open':
            joined += '  ' * max(list_level, 0) + '* '
        elif token.type == 'list_item_close':
            # the item's paragraph already closed with a blank line
            if joined.endswith('\n'):
                joined = joined[:-1]
        elif token.type == 'bullet_list_open':
            # nested list: pull the sub-list up against its parent item
            if list_level > -1:
                joined = joined[:-1]
            list_level += 1
        elif token.type == 'bullet_list_close':
            if list_level > -1:
                joined += '\n'
            list_level -= 1
        elif token.type == 'fence':
            if parse_code_fences:
                joined += f'```{token.info}\n{token.content}```\n\n'
        # paragraph_open and blockquote_close contribute nothing

    return joined.strip()
