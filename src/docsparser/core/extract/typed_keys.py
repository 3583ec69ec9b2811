"""Typed key list grammar: "* `key` type (optional) _Tag_ - description" bullet lists"""

import re
from typing import Optional

from docsparser.core.errors import DocsParseError
from docsparser.core.extract.join import safely_join_tokens
from docsparser.core.extract.tags import parse_heading_tags
from docsparser.core.extract.types import raw_type_to_type_information
from docsparser.core.models import ListItem, NestedList, ParseRules, TypedKey, TypedKeyList


DEFAULT_RAW_TYPE = 'string'

OPTIONAL_RE = re.compile(r' ?\(optional\) ?')
OPTIONAL_ANY_CASE_RE = re.compile(r' ?\(optional\) ?', re.IGNORECASE)
TAGS_RE = re.compile(r'.+?((?: _(?:[^_]+?)_)+)')
TAG_STRIP_RE = re.compile(r'_.+?_')
DESCRIPTION_LEAD_RE = re.compile(r'^- ?')


def get_nested_list(list_tokens: list) -> NestedList:
    """Build the item tree of a bullet list, attaching each sub-list to its owning item."""
    root = NestedList()
    lists: list[NestedList] = [root]
    current: Optional[ListItem] = None

    for token in list_tokens:
        if token.type == 'list_item_open':
            current = ListItem(tokens=[])
        elif token.type == 'list_item_close':
            # items owning a sub-list were attached when the sub-list opened
            if current is not None:
                lists[-1].items.append(current)
            current = None
        elif token.type == 'bullet_list_open':
            if current is None:
                continue    # the list's own opening token
            current.nested_list = NestedList()
            lists[-1].items.append(current)
            lists.append(current.nested_list)
        elif token.type == 'bullet_list_close':
            if len(lists) > 1:
                lists.pop()
        elif current is not None:
            current.tokens.append(token)

    return root


def _is_typed_key_item(item: ListItem) -> bool:
    if len(item.tokens) != 3:
        return False
    children = item.tokens[1].children
    return bool(children) and children[0].type == 'code_inline'


def _item_text(item: ListItem) -> str:
    return ' '.join(t.content for t in item.tokens if t.type == 'inline')


def _item_to_typed_key(item: ListItem, rules: ParseRules) -> TypedKey:
    if len(item.tokens) != 3:
        raise DocsParseError(
            f'Expected list item representing a typed key to have 3 child tokens, got {len(item.tokens)} '
            f'for "{_item_text(item)}"'
        )
    children = item.tokens[1].children or []
    if len(children) < 1:
        raise DocsParseError(
            f'Expected token to have at least 1 child for typed key extraction, got "{_item_text(item)}"'
        )
    key_token = children[0]
    if key_token.type != 'code_inline':
        raise DocsParseError(
            f'Expected key token to be an inline code block, got "{safely_join_tokens(children)}"'
        )

    type_and_description = children[1:]
    joined = safely_join_tokens(type_and_description)
    raw_type = joined.split('-')[0] if type_and_description else ''
    raw_description = joined[len(raw_type):]

    if OPTIONAL_ANY_CASE_RE.search(raw_description):
        raise DocsParseError(
            f'optionality for a typed key should be defined before the "-" and after the type, '
            f'see "{key_token.content}"'
        )
    if any(m.group().strip() != '(optional)' for m in OPTIONAL_ANY_CASE_RE.finditer(raw_type)):
        raise DocsParseError(
            f'optionality should be defined with "(optional)", all lower case, no capital "O", '
            f'see "{key_token.content}"'
        )

    # optional marker, then tags, then the type itself
    required = not OPTIONAL_RE.search(raw_type)
    tag_match = TAGS_RE.match(raw_type)
    additional_tags = parse_heading_tags(tag_match.group(1)) if tag_match else []
    cleaned_type = TAG_STRIP_RE.sub('', OPTIONAL_RE.sub('', raw_type)).strip() or DEFAULT_RAW_TYPE

    sub_typed_keys = None
    if item.nested_list is not None:
        sub_typed_keys = TypedKeyList(_convert_nested_list(item.nested_list, rules))

    return TypedKey(
        key=key_token.content,
        type=raw_type_to_type_information(cleaned_type, raw_description, sub_typed_keys, rules),
        description=DESCRIPTION_LEAD_RE.sub('', raw_description.strip()),
        required=required,
        additional_tags=additional_tags,
    )


def _convert_nested_list(nested: NestedList, rules: ParseRules) -> list[TypedKey]:
    keys: list[TypedKey] = []
    for item in nested.items:
        # a prose lead-in item whose sub-list carries the actual keys
        if not _is_typed_key_item(item) and item.nested_list is not None:
            keys.extend(_convert_nested_list(item.nested_list, rules))
            continue
        keys.append(_item_to_typed_key(item, rules))
    return keys


def convert_list_to_typed_keys(list_tokens: list, rules: Optional[ParseRules] = None) -> TypedKeyList:
    """Parse a bullet list's tokens into an unconsumed TypedKeyList."""
    rules = rules or ParseRules()
    return TypedKeyList(_convert_nested_list(get_nested_list(list_tokens), rules))
