"""Optional YAML configuration for paktxt defaults."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import PaktxtError
from .filters import parse_patterns

CONFIG_FILENAME = ".paktxt.yaml"


class PaktxtConfig(BaseModel):
    """Default pattern lists and output name, overridable from the CLI."""

    exclude: list[str] = Field(
        default_factory=list, description="Glob patterns to exclude"
    )
    filter: list[str] = Field(
        default_factory=list, description="Whitelist glob patterns"
    )
    output_file: Optional[str] = Field(
        None, description="Default archive file name for 'pack'"
    )

    @field_validator("exclude", "filter", mode="before")
    @classmethod
    def split_patterns(cls, v):
        """Accept the comma-separated form as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return parse_patterns(v)
        if isinstance(v, list):
            return [str(p).strip() for p in v if str(p).strip()]
        return v

    def merged(
        self,
        exclude: Optional[str] = None,
        filter: Optional[str] = None,
    ) -> "PaktxtConfig":
        """Return a copy where non-empty CLI pattern strings replace the defaults."""
        updates = {}
        if exclude:
            updates["exclude"] = parse_patterns(exclude)
        if filter:
            updates["filter"] = parse_patterns(filter)
        return self.model_copy(update=updates)


def load_config(path: Optional[Path] = None, search_dir: Optional[Path] = None):
    """
    Load configuration from YAML.

    Args:
        path: Explicit config file; must exist when given
        search_dir: Directory checked for .paktxt.yaml when no path is given

    Returns:
        PaktxtConfig (defaults when no file is found)

    Raises:
        PaktxtError: If the file cannot be read or is not valid configuration
    """
    if path is None:
        candidate = Path(search_dir or ".") / CONFIG_FILENAME
        if not candidate.is_file():
            return PaktxtConfig()
        path = candidate

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise PaktxtError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise PaktxtError(f"Config file {path} must contain a mapping")

    try:
        return PaktxtConfig(**data)
    except ValidationError as e:
        raise PaktxtError(f"Invalid config file {path}: {e}") from e
