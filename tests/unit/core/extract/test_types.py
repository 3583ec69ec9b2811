"""Unit tests for core/extract/types.py"""

import pytest

from docsparser.core.errors import DocsParseError
from docsparser.core.extract.types import (
    GenericType,
    get_top_level_generic_type,
    get_top_level_multi_types,
    get_top_level_ordered_types,
    raw_type_to_type_information,
    safely_separate_type_string_on,
)
from docsparser.core.models import DocumentationTag, ParseRules, TypedKey, TypedKeyList


STRING = {'collection': False, 'type': 'String', 'possibleValues': None}


def _keys():
    return TypedKeyList([
        TypedKey(
            key='width',
            type={'collection': False, 'type': 'Integer'},
            description='The width.',
            required=True,
        ),
        TypedKey(
            key='height',
            type={'collection': False, 'type': 'Integer'},
            description='The height.',
            required=False,
            additional_tags=[DocumentationTag.OS_MACOS],
        ),
    ])


# --- splitting ---

def test_separate_ignores_nested_separators():
    """Separators inside <...> or {...} are not split on."""
    parts = safely_separate_type_string_on('A | B<C | D> | {e | f}', '|')
    assert parts == ['A', 'B<C | D>', '{e | f}']


def test_separate_nested_generic_union():
    """A union nested two generics deep stays with its outer type."""
    assert get_top_level_multi_types('Map<string, Record<string | number>> | Array') == [
        'Map<string, Record<string | number>>',
        'Array',
    ]


def test_separate_drops_empty_members():
    """Empty members are dropped."""
    assert get_top_level_multi_types(' | A | ') == ['A']


def test_ordered_types():
    """Comma split respects generics."""
    assert get_top_level_ordered_types('string, Record<string, any>') == ['string', 'Record<string, any>']


def test_generic_type_split():
    """Outer and inner types split at the first '<' and last '>'."""
    assert get_top_level_generic_type('Promise<Record<string, any>>') == GenericType('Promise', 'Record<string, any>')
    assert get_top_level_generic_type('Promise<string>[]') == GenericType('Promise', 'string')
    assert get_top_level_generic_type('string') is None


# --- primitives ---

def test_plain_string():
    """Either casing of string is a String."""
    assert raw_type_to_type_information('string', '', None) == STRING
    assert raw_type_to_type_information('String', '', None) == STRING


def test_capitalised_primitive_rejected_when_strict():
    """Capitalised primitives raise under lowercase_primitives."""
    rules = ParseRules(lowercase_primitives=True)
    with pytest.raises(DocsParseError, match='Use lowercase "boolean" instead of "Boolean"'):
        raw_type_to_type_information('Boolean', '', None, rules)
    assert raw_type_to_type_information('boolean', '', None, rules) == {'collection': False, 'type': 'boolean'}


def test_null():
    """null, backticked or not."""
    assert raw_type_to_type_information('null', '', None) == {'type': 'null', 'collection': False}
    assert raw_type_to_type_information('`null`', '', None) == {'type': 'null', 'collection': False}


def test_collection_suffix():
    """A trailing [] marks a collection."""
    assert raw_type_to_type_information('Integer[]', '', None) == {'collection': True, 'type': 'Integer'}


def test_plain_named_type():
    """Unknown names pass through as references."""
    assert raw_type_to_type_information('BrowserWindow', '', None) == {'collection': False, 'type': 'BrowserWindow'}


# --- unions ---

def test_union():
    """A top-level '|' produces a list of member types."""
    info = raw_type_to_type_information('Integer | string', '', None)
    assert info == {
        'collection': False,
        'type': [{'collection': False, 'type': 'Integer'}, STRING],
    }


def test_bracketed_union_collection():
    """(A | B)[] is a collection of the union."""
    info = raw_type_to_type_information('(Integer | boolean)[]', '', None)
    assert info['collection'] is True
    assert [t['collection'] for t in info['type']] == [False, False]


def test_unbracketed_union_collection_applies_to_last_member():
    """A | B[] only makes B a collection."""
    info = raw_type_to_type_information('Integer | boolean[]', '', None)
    assert info['collection'] is False
    assert info['type'] == [
        {'collection': False, 'type': 'Integer'},
        {'collection': True, 'type': 'boolean'},
    ]


# --- string enums ---

def test_string_enum_from_description():
    """Without a sub list, possible values come from the description."""
    info = raw_type_to_type_information('string', 'Can be `light` or `dark`.', None)
    assert info['possibleValues'] == [
        {'value': 'light', 'description': ''},
        {'value': 'dark', 'description': ''},
    ]


def test_string_enum_from_sub_list():
    """A sub list provides possible values with descriptions."""
    info = raw_type_to_type_information('string', 'Can be `ignored`.', _keys())
    assert info['possibleValues'] == [
        {'value': 'width', 'description': 'The width.'},
        {'value': 'height', 'description': 'The height.'},
    ]


# --- Object / Function ---

def test_object_claims_sub_list():
    """Object converts the sub list into properties."""
    keys = _keys()
    info = raw_type_to_type_information('Object', '', keys)
    assert info['type'] == 'Object'
    assert info['properties'][0] == {
        'name': 'width',
        'description': 'The width.',
        'required': True,
        'additionalTags': [],
        'collection': False,
        'type': 'Integer',
    }
    assert info['properties'][1]['additionalTags'] == [DocumentationTag.OS_MACOS]
    assert keys.consumed


def test_object_without_sub_list():
    """An Object with no sub list has no properties."""
    assert raw_type_to_type_information('Object', '', None) == {'collection': False, 'type': 'Object', 'properties': []}


def test_function_claims_sub_list_as_parameters():
    """Function converts the sub list into parameters."""
    info = raw_type_to_type_information('Function', '', _keys())
    assert info['type'] == 'Function'
    assert info['returns'] is None
    assert [p['name'] for p in info['parameters']] == ['width', 'height']
    assert 'additionalTags' not in info['parameters'][0]


def test_sub_list_claimed_once():
    """The first claimant wins; later ones see nothing."""
    info = raw_type_to_type_information('Object | Function', '', _keys())
    obj, fn = info['type']
    assert len(obj['properties']) == 2
    assert fn['parameters'] == []


# --- generics ---

def test_promise_generic():
    """Generic outer types keep their inner types."""
    info = raw_type_to_type_information('Promise<void>', '', None)
    assert info == {
        'collection': False,
        'type': 'Promise',
        'innerTypes': [{'collection': False, 'type': 'void'}],
    }


def test_record_generic():
    """Multiple inner types are parsed in order."""
    info = raw_type_to_type_information('Record<string, any>', '', None)
    assert info['innerTypes'] == [STRING, {'collection': False, 'type': 'any'}]


def test_promise_object_claims_sub_list():
    """An inner Object claims the sub list as its properties."""
    info = raw_type_to_type_information('Promise<Object>', '', _keys())
    inner = info['innerTypes'][0]
    assert inner['type'] == 'Object'
    assert [p['name'] for p in inner['properties']] == ['width', 'height']


def test_generic_collection():
    """Generic types can be collections."""
    info = raw_type_to_type_information('Promise<string>[]', '', None)
    assert info['collection'] is True
    assert info['type'] == 'Promise'


def test_empty_generic_rejected():
    """A generic with no inner types raises."""
    with pytest.raises(DocsParseError, match='"Foo<>" has none'):
        raw_type_to_type_information('Foo<>', '', None)


def test_function_generic():
    """Function<P..., R>: the last inner type is the return type."""
    info = raw_type_to_type_information('Function<string, boolean>', '', None)
    assert info == {
        'collection': False,
        'type': 'Function',
        'parameters': [STRING],
        'returns': {'collection': False, 'type': 'boolean'},
    }


# --- events ---

def test_event_reference():
    """Event<Foo> references a named event type."""
    info = raw_type_to_type_information('Event<DidNavigateEvent>', '', None)
    assert info == {
        'collection': False,
        'type': 'Event',
        'eventPropertiesReference': {'collection': False, 'type': 'DidNavigateEvent'},
    }


def test_event_with_sub_list():
    """Event<> takes its properties from the sub list."""
    info = raw_type_to_type_information('Event<>', '', _keys())
    assert [p['name'] for p in info['eventProperties']] == ['width', 'height']


def test_event_without_sub_list_rejected():
    """Event<> needs a parameter list."""
    with pytest.raises(DocsParseError, match='without a parameter list'):
        raw_type_to_type_information('Event<>', '', None)


def test_event_inner_type_and_sub_list_rejected():
    """Event<Foo> with a parameter list is ambiguous."""
    with pytest.raises(DocsParseError, match='inner types AND a parameter list'):
        raw_type_to_type_information('Event<Foo>', '', _keys())


def test_event_multiple_inner_types_rejected():
    """Event<> takes at most one inner type."""
    with pytest.raises(DocsParseError, match='at most one inner type'):
        raw_type_to_type_information('Event<Foo, Bar>', '', None)
