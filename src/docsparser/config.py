"""Application configuration: settings schema and docsparser.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from docsparser.core.extract.extract import DEFAULT_REPO_URL, DEFAULT_WEBSITE_URL
from docsparser.core.models import ParseRules


CONFIG_FILE = "docsparser.yaml"
ENV_PREFIX = "DOCSPARSER_"


class Settings(BaseModel):
    api_dir:        str = Field(default="docs/api", description="API docs directory, relative to the package root")
    module_version: Optional[str] = Field(default=None, description="Version stamped on containers; package.json when unset")
    package_mode:   str = Field(default="single", pattern="^(single|multi)$", description="single or multi")
    website_url:    str = Field(default=DEFAULT_WEBSITE_URL, description="Base URL of the published docs")
    repo_url:       str = Field(default=DEFAULT_REPO_URL, description="Repository docs URL; {{VERSION}} is substituted")
    use_readme:     bool = Field(default=False, description="Parse README.md instead of the API docs directory")
    out_dir:        str = Field(default=".", description="Directory for the generated JSON")
    out_file:       str = Field(default="api.json", description="Name of the generated JSON file")
    parser_config:  str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    lowercase_primitives: bool = Field(default=False, description="Reject Boolean / Number / String type names")

    def parse_rules(self) -> ParseRules:
        return ParseRules(lowercase_primitives=self.lowercase_primitives)


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from docsparser.yaml, then DOCSPARSER_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
