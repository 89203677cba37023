"""Load variable bindings from YAML files.

Two layouts are accepted:

    # flat
    x: 3
    y: 2.3

    # sectioned
    variables:
      x: 3
      y: 2.3
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError


class BindingsError(ValueError):
    """Raised when a bindings file cannot be read or holds invalid values."""


class BindingsFile(BaseModel):
    """Validated contents of a bindings file."""

    variables: dict[str, float]


def parse_assignment(text: str) -> tuple[str, float]:
    """Parse a ``name=value`` assignment.

    Raises:
        BindingsError: If the text is not a name followed by '=' and a number
    """
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise BindingsError(f"Expected NAME=VALUE, got {text!r}")
    try:
        return name, float(value)
    except ValueError:
        raise BindingsError(f"Invalid number for {name}: {value.strip()!r}") from None


def load_bindings(path: Path) -> dict[str, float]:
    """Read variable bindings from a YAML file.

    Raises:
        BindingsError: If the file is not valid YAML or a value is not a number
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise BindingsError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(data, dict) and not (
        set(data) == {"variables"} and isinstance(data["variables"], dict)
    ):
        data = {"variables": data}

    try:
        return BindingsFile.model_validate(data).variables
    except ValidationError as e:
        raise BindingsError(f"Invalid bindings in {path}: {e}") from e
