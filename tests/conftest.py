"""Root test configuration: isolate tests from ambient docsparser configuration"""

import pytest

from docsparser.config import ENV_PREFIX, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove DOCSPARSER_<FIELD> variables inherited from the developer's shell."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{name.upper()}", raising=False)
