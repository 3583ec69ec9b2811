"""Extension point for adding fields to parsed containers"""

from __future__ import annotations
from abc import ABC
from typing import Any, Optional


class DocsParserPlugin(ABC):
    """Base class for parser plugins.

    Both hooks are optional. A hook returns a dict whose keys are merged into
    the container (or None to leave it unchanged); containers are plain dicts.
    """

    def __init__(self, options: Optional[dict[str, Any]] = None):
        self.options = options or {}

    def extend_container(self, container: dict, relative_docs_path: str) -> dict | None:
        """Called for every base container (module, class, element, structure)."""
        return None

    def extend_api(self, api: dict, tokens: list) -> dict | None:
        """Called for every module, class and element with the tokens under its heading."""
        return None
