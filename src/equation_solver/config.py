"""Solver configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from equation_solver.parser import DEFAULT_MAX_DEPTH

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    """Raised when a configuration source holds an invalid value."""


@dataclass
class SolverConfig:
    """Parsing and evaluation settings.

    Attributes:
        max_depth: Maximum group nesting depth accepted by the parser,
            validator and evaluator
        validate_on_construct: Run the structural validator when an
            Expression is constructed, so malformed input fails early
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    validate_on_construct: bool = False

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ConfigError(f"max_depth must be at least 1, got {self.max_depth}")

    @classmethod
    def from_env(cls) -> SolverConfig:
        """Create config from environment variables.

        Reads:
        1. EQUATION_SOLVER_MAX_DEPTH (integer)
        2. EQUATION_SOLVER_VALIDATE (1/true/yes/on to enable)

        Unset variables keep their defaults.
        """
        config = cls()

        max_depth = os.environ.get("EQUATION_SOLVER_MAX_DEPTH")
        if max_depth:
            try:
                config = cls(max_depth=int(max_depth))
            except ValueError as e:
                raise ConfigError(f"Invalid EQUATION_SOLVER_MAX_DEPTH: {max_depth!r}") from e

        validate = os.environ.get("EQUATION_SOLVER_VALIDATE")
        if validate:
            config.validate_on_construct = validate.strip().lower() in _TRUTHY

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> SolverConfig:
        """Create config from a YAML file.

        The file may hold the keys directly or under a top-level
        ``solver`` section:

            solver:
              max_depth: 64
              validate_on_construct: true
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {path}")
        if "solver" in data:
            data = data["solver"] or {}
            if not isinstance(data, dict):
                raise ConfigError(f"Expected a mapping under 'solver' in {path}")

        unknown = set(data) - {"max_depth", "validate_on_construct"}
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

        max_depth = data.get("max_depth", DEFAULT_MAX_DEPTH)
        if not isinstance(max_depth, int) or isinstance(max_depth, bool):
            raise ConfigError(f"max_depth must be an integer in {path}")

        return cls(
            max_depth=max_depth,
            validate_on_construct=bool(data.get("validate_on_construct", False)),
        )
