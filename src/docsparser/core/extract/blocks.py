"""Method, property and event blocks assembled from heading groups"""

import re
from enum import Enum
from typing import Optional

from docsparser.core.errors import DocsParseError
from docsparser.core.extract.join import safely_join_tokens
from docsparser.core.extract.sections import (
    find_content_after_heading_close,
    find_content_after_list,
    find_next_list,
    headings_and_content,
)
from docsparser.core.extract.tags import parse_heading_tags
from docsparser.core.extract.typed_keys import convert_list_to_typed_keys
from docsparser.core.extract.types import raw_type_to_type_information
from docsparser.core.models import GuessedParam, HeadingGroup, ParseRules, TypedKey, TypeInformation
from docsparser.core.utils.slug import slugify_heading


METHOD_RE = re.compile(r'`(?:.+\.)?(.+?)(<.+>)?(\(.*?\))`((?: _[^_]+?_)*)')
CONSTRUCTOR_RE = re.compile(r'`(?:new )?(.+?)(<.+>)?(\(.*?\))`')
PROPERTY_RE = re.compile(r'`(?:.+\.)?(.+?)`((?: _[^_]+?_)*)')
EVENT_RE = re.compile(r"^Event: '(.+)'((?: _[^_]+?_)*)")
SIGNATURE_RE = re.compile(r'^\((?:[A-Za-z0-9_,\[\] ]|\.\.\.)+\)$')
OPTIONAL_MARKER_RE = re.compile(r'\(optional\)', re.IGNORECASE)


class StripReturnTypeBehavior(Enum):
    STRIP = 'strip'
    DO_NOT_STRIP = 'do_not_strip'


def extract_return_type(
    tokens: list,
    strip: StripReturnTypeBehavior = StripReturnTypeBehavior.STRIP,
    prefix: str = 'Returns',
    rules: Optional[ParseRules] = None,
    ) -> tuple[str, Optional[TypeInformation]]:
    """Locate a "<prefix> `Type`" phrase in the joined tokens and parse its type.

    Returns (description, type); type is None when no phrase is found.
    With STRIP the matched phrase is removed from the description.
    """
    description = safely_join_tokens(tokens).strip()
    if not re.search(rf'^{prefix} ', description, re.IGNORECASE | re.MULTILINE):
        return description, None

    match = (
        re.search(rf'{prefix} `([^`]+?)`:?(\. |\.\n|\n|$)', description)
        or re.search(rf'{prefix} `([^`]+?)` - ', description)
        or re.search(rf'{prefix} `([^`]+?)` ', description)
    )
    if not match:
        return description, None

    if description[match.end():].strip().startswith('|'):
        raise DocsParseError(
            'Found a return type declaration that appears to be declaring a type union (A | B) but in the '
            'incorrect format. Type unions must be fully enclosed in backticks. For instance, instead of '
            '`A` | `B` you should specify `A | B`.\n'
            f'Specifically this error was encountered here:\n  "{description[:100]}"...'
        )

    parsed_description = description
    if strip is StripReturnTypeBehavior.STRIP:
        parsed_description = description.replace(match.group(0), '', 1)

    typed_keys = None
    list_tokens = find_next_list(tokens)
    if list_tokens:
        try:
            typed_keys = convert_list_to_typed_keys(list_tokens, rules)
        except DocsParseError:
            typed_keys = None   # prose list, not a type description

    return parsed_description.strip(), raw_type_to_type_information(
        match.group(1), parsed_description, typed_keys, rules,
    )


def guess_parameters_from_signature(signature: str) -> list[GuessedParam]:
    """Guess parameter names from "(a, [b, [c]])"; names inside [ ] are optional."""
    if not SIGNATURE_RE.match(signature):
        raise DocsParseError(f'signature should be a bracket wrapped group of parameters, got "{signature}"')

    params: list[GuessedParam] = []
    current = ''
    current_optional = False
    optional_depth = 0

    def push_current():
        nonlocal current
        if current.strip():
            params.append({'name': current.strip(), 'optional': current_optional})
        current = ''

    for char in signature[1:-1]:
        if char == '[':
            optional_depth += 1
        elif char == ']':
            push_current()
            optional_depth -= 1
        elif char == ',':
            push_current()
        else:
            if not current.strip():
                current_optional = optional_depth > 0
            current += char
    push_current()
    return params


def _method_parameter(typed_key: TypedKey) -> dict:
    param = {
        'name': typed_key.key,
        'description': typed_key.description,
        'required': typed_key.required,
    }
    if typed_key.additional_tags:
        param['additionalTags'] = list(typed_key.additional_tags)
    return {**param, **typed_key.type}


def _signature_parameters(heading: HeadingGroup, name: str, signature: str, rules: ParseRules) -> list[dict]:
    guessed = guess_parameters_from_signature(signature)
    list_tokens = find_next_list(heading.content)
    if list_tokens is None:
        raise DocsParseError(f'Method {heading.heading} has at least one parameter but no parameter type list')

    parameters = [_method_parameter(k) for k in convert_list_to_typed_keys(list_tokens, rules).take()]
    if len(parameters) != len(guessed):
        raise DocsParseError(
            f'should have the same number of documented parameters as we have in the method '
            f'signature: {signature}, found {len(parameters)} documented and {len(guessed)} in the signature'
        )
    for param, guess in zip(parameters, guessed):
        if param['required'] == guess['optional']:
            raise DocsParseError(
                'the optionality of a parameter in the signature should match the documented optionality '
                f'in the parameter description: {name}{signature}, while parsing parameter: "{param["name"]}"'
            )
    return parameters


def heading_to_method_block(
    heading: Optional[HeadingGroup],
    is_constructor: bool = False,
    rules: Optional[ParseRules] = None,
    ) -> Optional[dict]:
    """Build a method block from a "`obj.name(a, [b])` _Tag_" heading group."""
    if heading is None:
        return None
    rules = rules or ParseRules()

    match = (CONSTRUCTOR_RE if is_constructor else METHOD_RE).search(heading.heading)
    if not match:
        raise DocsParseError(f'each method should have a code blocked method name, got "{heading.heading}"')
    name, generics, signature = match.group(1), match.group(2), match.group(3)
    heading_tags = None if is_constructor else match.group(4)

    parameters: list[dict] = []
    if signature != '()':
        parameters = _signature_parameters(heading, name, signature, rules)
        return_tokens = find_content_after_list(heading.content, True)
    else:
        return_tokens = find_content_after_heading_close(heading.content)

    description, returns = extract_return_type(return_tokens, rules=rules)
    block = {
        'name': name,
        'signature': signature,
        'description': description,
        'parameters': parameters,
        'returns': returns,
        'additionalTags': parse_heading_tags(heading_tags),
        'urlFragment': f'#{slugify_heading(heading.heading)}',
    }
    if generics:
        block['rawGenerics'] = generics
    return block


def heading_to_property_block(heading: HeadingGroup, rules: Optional[ParseRules] = None) -> dict:
    """Build a property block from a "`obj.name` _Readonly_" heading and its "A `type` ..." body."""
    match = PROPERTY_RE.search(heading.heading)
    if not match:
        raise DocsParseError(f'each property should have a code blocked property name, got "{heading.heading}"')
    name, heading_tags = match.group(1), match.group(2)

    description, prop_type = extract_return_type(
        find_content_after_heading_close(heading.content),
        StripReturnTypeBehavior.DO_NOT_STRIP,
        'An?',
        rules,
    )
    if prop_type is None:
        raise DocsParseError(f'Property {heading.heading} should have a declared type but it does not')

    return {
        'name': name,
        'description': description,
        'required': not OPTIONAL_MARKER_RE.search(description),
        'additionalTags': parse_heading_tags(heading_tags),
        'urlFragment': f'#{slugify_heading(heading.heading)}',
        **prop_type,
    }


def _event_parameter(typed_key: TypedKey) -> dict:
    param = {
        'name': typed_key.key,
        'description': typed_key.description,
        **typed_key.type,
        'required': typed_key.required,
    }
    if typed_key.additional_tags:
        param['additionalTags'] = list(typed_key.additional_tags)
    return param


def heading_to_event_block(heading: HeadingGroup, rules: Optional[ParseRules] = None) -> dict:
    """Build an event block from an "Event: 'name'" heading; "Returns:" introduces its parameters."""
    match = EVENT_RE.search(heading.heading)
    if not match:
        raise DocsParseError(f"each event should have a quoted event name, got \"{heading.heading}\"")
    name, heading_tags = match.group(1), match.group(2)

    parameters: list[dict] = []
    body = safely_join_tokens(find_content_after_heading_close(heading.content))
    if body.strip().startswith('Returns:'):
        list_tokens = find_next_list(heading.content)
        if list_tokens:
            parameters = [_event_parameter(k) for k in convert_list_to_typed_keys(list_tokens, rules).take()]

    return {
        'name': name,
        'description': safely_join_tokens(find_content_after_list(heading.content, True)),
        'parameters': parameters,
        'additionalTags': parse_heading_tags(heading_tags),
        'urlFragment': f'#{slugify_heading(heading.heading)}',
    }


def parse_method_blocks(tokens: Optional[list], rules: Optional[ParseRules] = None) -> list[dict]:
    if tokens is None:
        return []
    return [heading_to_method_block(h, rules=rules) for h in headings_and_content(tokens)]


def parse_property_blocks(tokens: Optional[list], rules: Optional[ParseRules] = None) -> list[dict]:
    if tokens is None:
        return []
    return [heading_to_property_block(h, rules) for h in headings_and_content(tokens)]


def parse_event_blocks(tokens: Optional[list], rules: Optional[ParseRules] = None) -> list[dict]:
    if tokens is None:
        return []
    return [heading_to_event_block(h, rules) for h in headings_and_content(tokens)]
