"""
Parser configuration for EDL.

A `ParserConfig` carries the per-parser settings that are fixed at construction
time: which condition-header dialect to use and how deep the parser may recurse
before reporting "Nesting too deep".

Settings come from keyword arguments, a plain dict, or a JSON file:

    {
        "dialect": "quirks",
        "max_depth": 400
    }

Classes:
    - ParserConfig: Validated parser settings.
    - ConfigError: Raised for unknown keys, bad values, or unreadable files.
"""

import json
import logging
from typing import Any

from edl.edl_dialect import DIALECTS, STRICT

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 200


class ConfigError(Exception):
    """Raised when a parser configuration is invalid.

    Attributes:
        problems (list[str]): One entry per invalid setting.
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


class ParserConfig:
    """Settings for one `Parser` instance.

    Attributes:
        dialect (str): "strict", "quirks" or "gml".
        max_depth (int): Maximum statement/expression nesting depth.
    """

    KEYS = ("dialect", "max_depth")

    def __init__(self, dialect: str = STRICT, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        problems: list[str] = []
        if not isinstance(dialect, str) or dialect.lower() not in DIALECTS:
            problems.append(
                f"dialect must be one of {', '.join(DIALECTS)}, got {dialect!r}"
            )
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            problems.append(f"max_depth must be a positive integer, got {max_depth!r}")
        if problems:
            raise ConfigError("Invalid parser configuration", problems)

        self.dialect = dialect.lower()
        self.max_depth = max_depth

    def __repr__(self) -> str:
        return f"ParserConfig(dialect={self.dialect!r}, max_depth={self.max_depth})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, ParserConfig)
            and self.dialect == other.dialect
            and self.max_depth == other.max_depth
        )

    def replace(self, **overrides: Any) -> "ParserConfig":
        """Returns a copy with the given settings changed. `None` values are ignored."""
        values = self.to_dict()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ParserConfig.from_dict(values)

    def to_dict(self) -> dict[str, Any]:
        return {"dialect": self.dialect, "max_depth": self.max_depth}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ParserConfig":
        """
        Builds a config from a mapping of setting names to values.

        Raises:
            ConfigError: If the mapping is not a dict, has unknown keys, or holds
                invalid values.
        """
        if not isinstance(raw, dict):
            raise ConfigError("Configuration must be a JSON object")
        unknown = sorted(set(raw) - set(cls.KEYS))
        if unknown:
            raise ConfigError(
                "Unknown configuration key(s)", [f"unknown key {k!r}" for k in unknown]
            )
        return cls(**raw)

    @classmethod
    def load_from_json(cls, path: str) -> "ParserConfig":
        """
        Loads a config from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or its contents are invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load parser config: {e}") from e

        config = cls.from_dict(raw_cfg)
        logger.debug("loaded %r from %s", config, path)
        return config
