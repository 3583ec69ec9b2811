"""Shared markdown-it token utilities"""


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def find_index(tokens: list, token_type: str, start: int = 0) -> int:
    """Return the index of the first token of token_type at or after start, else -1."""
    for i in range(start, len(tokens)):
        if tokens[i].type == token_type:
            return i
    return -1
