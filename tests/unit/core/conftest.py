"""Shared fixtures for core unit tests"""

import pytest
from markdown_it import MarkdownIt

from docsparser.core.extract.sections import find_next_list


APP_MD = """\
# app

> Control your application's event lifecycle.

Process: [Main](../glossary.md#main-process)

## Events

### Event: 'ready'

Returns:

* `launchInfo` Record<string, any> _macOS_

Emitted once, when the application has finished initializing.

## Methods

### `app.quit()`

Try to close all windows.

### `app.getPath(name)`

* `name` string - You can request the following paths by the name.

Returns `string` - A path to a special directory.

## Properties

### `app.name` _Readonly_

A `string` property that indicates the current application's name.
"""

@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False})


@pytest.fixture(name="app_tokens")
def app_tokens_fixture(parser):
    return parser.parse(APP_MD)


@pytest.fixture(name="list_tokens")
def list_tokens_fixture(parser):
    """Parse markdown and return the tokens of its first bullet list."""
    def _list_tokens(md: str):
        return find_next_list(parser.parse(md))
    return _list_tokens
