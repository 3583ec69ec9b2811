"""String enum extraction from prose such as "Can be `a`, `b` or `c`."

A small character-level state machine: wait for a quoted value, read it up
to the matching quote, then expect a separator, an ending token or the end
of input. Values may be wrapped in ~ strikethrough markers which must unwind
after the value closes.
"""

import re
from typing import Optional

from docsparser.core.errors import DocsParseError
from docsparser.core.models import PossibleStringValue


LOCATOR_RE = re.compile(r'(?:can be|values? includes?) (.+)', re.IGNORECASE | re.DOTALL)

QUOTES = ('"', "'", '`')
WRAPPERS = ('~',)
SEPARATORS = (', or', ', and', ',', 'or', 'and')    # longest match first
ENDING_TOKENS = ('.', ';', '-')
TERMINATING_PHRASES = ('or an Object',)
SUFFIXES = ('(Deprecated)',)


def _separator_error(char: str, value_string: str, position: int) -> DocsParseError:
    caret = ' ' * (len('Context: ') + position) + '^'
    return DocsParseError(
        'Unexpected separator token while extracting string enum, expected a comma or "and" or "or" '
        f'but found "{char}"\nContext: {value_string}\n{caret}'
    )


def _match_separator(rest: str) -> Optional[str]:
    """Return the separator rest starts with; word separators must end at a word boundary."""
    for separator in SEPARATORS:
        if not rest.startswith(separator):
            continue
        following = rest[len(separator):len(separator) + 1]
        if separator[-1].isalpha() and following and not (
            following.isspace() or following in QUOTES or following in WRAPPERS
        ):
            continue
        return separator
    return None


def extract_string_enum(description: str) -> Optional[list[PossibleStringValue]]:
    """Return the quoted values listed after "can be" / "values include", or None if there are none."""
    match = LOCATOR_RE.search(description)
    if not match:
        return None

    value_string = match.group(1)
    values: list[str] = []
    current_value = ''
    quoter: Optional[str] = None
    wrappers: list[str] = []
    expecting_separator = False

    pos = 0
    while pos < len(value_string):
        char = value_string[pos]

        if quoter is not None:
            if char == quoter:
                values.append(current_value)
                current_value = ''
                quoter = None
                expecting_separator = True
            else:
                current_value += char
            pos += 1
            continue

        if char.isspace():
            pos += 1
            continue

        rest = value_string[pos:]
        if expecting_separator:
            suffix = next((s for s in SUFFIXES if rest.startswith(s)), None)
            if suffix:
                pos += len(suffix)
                continue
            if wrappers:
                if char != wrappers[-1]:
                    raise DocsParseError(
                        f'Expected an unwrapping token that matched "{wrappers[-1]}" but found "{char}"'
                        f'\nContext: {value_string}'
                    )
                wrappers.pop()
                pos += 1
                continue
            if any(rest.startswith(p) for p in TERMINATING_PHRASES):
                break
            separator = _match_separator(rest)
            if separator:
                expecting_separator = False
                pos += len(separator)
                continue
            if char in ENDING_TOKENS:
                break
            raise _separator_error(char, value_string, pos)

        if char in QUOTES:
            quoter = char
        elif char in WRAPPERS:
            wrappers.append(char)
        else:
            # plain prose where a value should start: the list is over
            break
        pos += 1

    if quoter is not None:
        raise DocsParseError(
            'Unexpected early termination of token sequence while extracting string enum, '
            f'did you forget to close a quote?\nContext: {value_string}'
        )
    if wrappers and expecting_separator:
        raise DocsParseError(
            f'Expected an unwrapping token that matched "{wrappers[-1]}" before the end of the value list'
            f'\nContext: {value_string}'
        )

    if not values:
        return None
    return [{'value': value, 'description': ''} for value in values]
