"""
Provides `ScanConfig`, the settings used by the docfront command line.

Settings can be given as a dictionary or loaded from a JSON file:

    {
        "recover": true,
        "extensions": [".js", ".jsx"],
        "encoding": "utf-8",
        "indent": 2
    }

Unknown keys and values of the wrong type are reported together through a
single `ConfigError`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a docfront configuration is invalid or cannot be loaded.

    Attributes:
        problems (list[str]): One description per offending key.
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


class ScanConfig:
    """Settings for scanning sources and writing results.

    Attributes:
        recover (bool): Give a malformed code block a "nop" summary instead of
            aborting the whole file.
        extensions (list[str]): File suffixes picked up when scanning a directory.
        encoding (str): Encoding used to read source files.
        indent (int | None): JSON output indentation; None writes compact JSON.
    """

    defaults: dict[str, Any] = {
        "recover": False,
        "extensions": [".js"],
        "encoding": "utf-8",
        "indent": 2,
    }

    def __init__(
        self,
        recover: bool = False,
        extensions: list[str] | None = None,
        encoding: str = "utf-8",
        indent: int | None = 2,
    ) -> None:
        self.recover = recover
        self.extensions = list(extensions) if extensions is not None else [".js"]
        self.encoding = encoding
        self.indent = indent

    def __repr__(self) -> str:
        return (
            f"ScanConfig(recover={self.recover}, extensions={self.extensions}, "
            f"encoding={self.encoding!r}, indent={self.indent})"
        )

    @staticmethod
    def _check(key: str, value: Any) -> str | None:
        if key == "recover" and not isinstance(value, bool):
            return f"'recover' must be a boolean, got {value!r}"
        if key == "extensions" and not (
            isinstance(value, list) and all(isinstance(v, str) for v in value)
        ):
            return f"'extensions' must be a list of strings, got {value!r}"
        if key == "encoding" and not isinstance(value, str):
            return f"'encoding' must be a string, got {value!r}"
        if key == "indent" and not (
            value is None or (isinstance(value, int) and not isinstance(value, bool))
        ):
            return f"'indent' must be an integer or null, got {value!r}"
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanConfig":
        """Builds a config from a mapping, filling in defaults for missing keys.

        Raises:
            ConfigError: If the mapping has unknown keys or wrongly typed values.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        problems: list[str] = []
        for key, value in data.items():
            if key not in cls.defaults:
                problems.append(f"unknown key '{key}'")
                continue
            problem = cls._check(key, value)
            if problem:
                problems.append(problem)
        if problems:
            raise ConfigError("Invalid configuration", problems)

        return cls(**{**cls.defaults, **data})

    @classmethod
    def from_json(cls, path: str) -> "ScanConfig":
        """Loads a config from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or parsed, or is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to load config file: {e}") from e

        config = cls.from_dict(raw_cfg)
        logger.debug("loaded %r from %s", config, path)
        return config


__all__ = ["ConfigError", "ScanConfig"]
