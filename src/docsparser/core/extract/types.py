"""Recursive-descent parser for documentation type strings.

A type string is what follows a key or a "Returns" phrase, e.g.
``string[]``, ``(Foo | Bar)[]``, ``Promise<Buffer>``,
``Function<string, boolean>`` or ``Event<FooEvent>``. Parsing produces a
TypeInformation dict; ``Function``, ``Object``, ``string`` and ``Event<>``
may claim the nested typed key list attached to the declaration. A nested
list is claimed at most once per call tree (see TypedKeyList.take).
"""

import re
from typing import NamedTuple, Optional

from docsparser.core.errors import DocsParseError
from docsparser.core.extract.enums import extract_string_enum
from docsparser.core.models import ParseRules, TypedKey, TypedKeyList, TypeInformation


CAPITALISED_PRIMITIVES = ('Boolean', 'Number', 'String')

_BRACKET_WRAPPED_RE = re.compile(r'^\((.+)\)$', re.DOTALL)


class GenericType(NamedTuple):
    outer_type:   str
    generic_type: str


# --- typed key conversions ---

def typed_key_to_parameter(typed_key: TypedKey) -> dict:
    return {
        'name': typed_key.key,
        'description': typed_key.description,
        'required': typed_key.required,
        **typed_key.type,
    }


def typed_key_to_property(typed_key: TypedKey) -> dict:
    return {
        'name': typed_key.key,
        'description': typed_key.description,
        'required': typed_key.required,
        'additionalTags': list(typed_key.additional_tags),
        **typed_key.type,
    }


def typed_key_to_possible_value(typed_key: TypedKey) -> dict:
    return {'value': typed_key.key, 'description': typed_key.description}


def _claim(sub_typed_keys: Optional[TypedKeyList], convert) -> Optional[list]:
    """Consume the sub list through convert if it is still available, else None."""
    if sub_typed_keys is None or sub_typed_keys.consumed:
        return None
    return [convert(k) for k in sub_typed_keys.take()]


# --- top-level splitting ---

def safely_separate_type_string_on(type_string: str, target_char: str) -> list[str]:
    """Split type_string on target_char outside any <...> or {...} nesting; drop empty members."""
    types = []
    current = ''
    depth = 0
    for char in type_string:
        if char == target_char and depth == 0:
            types.append(current)
            current = ''
            continue
        current += char
        if char in '<{':
            depth += 1
        elif char in '>}':
            depth -= 1
    types.append(current)
    return [t.strip() for t in types if t.strip()]


def get_top_level_multi_types(type_string: str) -> list[str]:
    return safely_separate_type_string_on(type_string, '|')


def get_top_level_ordered_types(type_string: str) -> list[str]:
    return safely_separate_type_string_on(type_string, ',')


def get_top_level_generic_type(type_string: str) -> Optional[GenericType]:
    """Split 'Outer<Inner>' (optionally suffixed with []) at the first '<' and last '>'."""
    if not (type_string.endswith('>') or type_string.endswith('>[]')):
        return None
    start = type_string.find('<')
    if start == -1:
        return None
    end = type_string.rfind('>')
    return GenericType(type_string[:start], type_string[start + 1:end])


# --- parser ---

def _check_primitive_case(type_string: str, rules: ParseRules) -> None:
    if rules.lowercase_primitives and type_string in CAPITALISED_PRIMITIVES:
        lower = type_string.lower()
        raise DocsParseError(
            f'Use lowercase "{lower}" instead of "{type_string}" for a primitive type'
        )


def raw_type_to_type_information(
    raw_type: str,
    related_description: str,
    sub_typed_keys: Optional[TypedKeyList],
    rules: Optional[ParseRules] = None,
    ) -> TypeInformation:
    """Parse raw_type into a TypeInformation dict.

    related_description feeds the string enum extractor for string types
    without a nested list of values.
    """
    rules = rules or ParseRules()
    if raw_type in ('null', '`null`'):
        return {'type': 'null', 'collection': False}

    collection = False
    type_string = raw_type.strip()
    if type_string.endswith('[]'):
        collection = True
        type_string = type_string[:-2].strip()

    # "(A | B)[]" is a collection of the union, "A | B[]" only makes B a collection
    was_bracket_wrapped = type_string.startswith('(') and type_string.endswith(')')
    type_string = _BRACKET_WRAPPED_RE.sub(r'\1', type_string)

    multi_types = get_top_level_multi_types(type_string)
    if len(multi_types) > 1:
        last = len(multi_types) - 1
        return {
            'collection': collection and was_bracket_wrapped,
            'type': [
                raw_type_to_type_information(
                    member + ('[]' if i == last and collection and not was_bracket_wrapped else ''),
                    related_description,
                    sub_typed_keys,
                    rules,
                )
                for i, member in enumerate(multi_types)
            ],
        }

    _check_primitive_case(type_string, rules)

    if type_string == 'Function':
        return {
            'collection': collection,
            'type': 'Function',
            'parameters': _claim(sub_typed_keys, typed_key_to_parameter) or [],
            'returns': None,
        }
    if type_string == 'Object':
        return {
            'collection': collection,
            'type': 'Object',
            'properties': _claim(sub_typed_keys, typed_key_to_property) or [],
        }
    if type_string in ('String', 'string'):
        possible_values = _claim(sub_typed_keys, typed_key_to_possible_value)
        if possible_values is None and related_description:
            possible_values = extract_string_enum(related_description)
        return {
            'collection': collection,
            'type': 'String',
            'possibleValues': possible_values,
        }

    generic = get_top_level_generic_type(type_string)
    if generic:
        return _generic_type_information(generic, collection, sub_typed_keys, rules)

    return {'collection': collection, 'type': type_string}


def _generic_type_information(
    generic: GenericType,
    collection: bool,
    sub_typed_keys: Optional[TypedKeyList],
    rules: ParseRules,
    ) -> TypeInformation:
    inner_types = []
    for inner in get_top_level_ordered_types(generic.generic_type):
        info = raw_type_to_type_information(inner, '', None, rules)
        if info['type'] == 'Object':
            claimed = _claim(sub_typed_keys, typed_key_to_property)
            info = {**info, 'properties': claimed or []}
        inner_types.append(info)

    outer = generic.outer_type
    if outer == 'Function':
        # Function<P1, ..., Pn, R>: the last inner type is the return type
        params = inner_types[:-1]
        return {
            'collection': collection,
            'type': 'Function',
            'parameters': params or _claim(sub_typed_keys, typed_key_to_parameter) or [],
            'returns': inner_types[-1] if inner_types else None,
        }

    if outer == 'Event':
        if inner_types:
            if sub_typed_keys is not None and not sub_typed_keys.consumed:
                raise DocsParseError('Event<> should not have declared inner types AND a parameter list')
            if len(inner_types) > 1:
                raise DocsParseError('Event<> should have at most one inner type')
            return {
                'collection': collection,
                'type': 'Event',
                'eventPropertiesReference': inner_types[0],
            }
        event_properties = _claim(sub_typed_keys, typed_key_to_property)
        if event_properties is None:
            raise DocsParseError('Event<> declaration without a parameter list')
        return {
            'collection': collection,
            'type': 'Event',
            'eventProperties': event_properties,
        }

    if not inner_types:
        raise DocsParseError(f'Generic types should have at least one inner type, "{outer}<>" has none')
    return {
        'collection': collection,
        'type': outer,
        'innerTypes': inner_types,
    }
