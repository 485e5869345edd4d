"""Configuration for the markup parser.

The parser itself is strict and has few knobs; this module holds
the policy decisions that are left to the embedding application (the name of
the synthetic root element, whether empty names are tolerated, how deep the
document may nest) together with JSON serialization and presets.
"""

import json
import sys
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_ROOT_TAG = "html"
DEFAULT_MAX_DEPTH = 200

# Each nesting level costs the parser three Python frames; the rest is
# headroom for the caller's own stack
FRAMES_PER_NESTING_LEVEL = 4

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def is_name(value: str) -> bool:
    """Check that ``value`` is a non-empty run of ASCII letters and digits."""
    return isinstance(value, str) and bool(value) and value.isascii() and value.isalnum()


def max_depth_ceiling() -> int:
    """Deepest nesting the parser can reach under the current recursion limit."""
    return sys.getrecursionlimit() // FRAMES_PER_NESTING_LEVEL


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration shared by the parser, API layer and CLI.

    Thread-safe due to frozen dataclass implementation; derive variations
    with :meth:`override` instead of mutating.
    """

    # Grammar policy
    root_tag: str = DEFAULT_ROOT_TAG
    allow_empty_names: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    # Diagnostics
    logging_level: str = "INFO"

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the configuration."""
        self._check_type("root_tag", str)
        self._check_type("allow_empty_names", bool)
        self._check_type("max_depth", int)
        self._check_type("logging_level", str)
        self._check_type("name", (str, type(None)))
        self._check_type("description", (str, type(None)))

        if not is_name(self.root_tag):
            raise ConfigValidationError(
                f"root_tag must be a non-empty ASCII alphanumeric name, "
                f"got {self.root_tag!r}",
                field_name="root_tag",
                suggestions=[f"Use the default {DEFAULT_ROOT_TAG!r}"],
            )
        if self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0", field_name="max_depth"
            )
        ceiling = max_depth_ceiling()
        if self.max_depth > ceiling:
            raise ConfigValidationError(
                f"max_depth must be <= {ceiling} under the current recursion limit",
                field_name="max_depth",
                suggestions=[
                    "Lower max_depth",
                    "Raise the limit with sys.setrecursionlimit() before "
                    "building the configuration",
                ],
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def _check_type(self, field_name: str, expected: Union[type, tuple]) -> None:
        value = getattr(self, field_name)
        # bool is an int subclass; a flag is never a valid depth
        if not isinstance(value, expected) or (
            isinstance(value, bool) and expected is int
        ):
            names = expected.__name__ if isinstance(expected, type) else " or ".join(
                t.__name__ for t in expected
            )
            raise ConfigValidationError(
                f"{field_name} must be of type {names}, "
                f"got {type(value).__name__}",
                field_name=field_name,
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> config.override(max_depth=50).max_depth
            50
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a JSON object")
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        path_obj = Path(path)
        try:
            content = path_obj.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {path_obj}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Default preset: empty tag and attribute names are rejected."""
        return cls(
            name="strict",
            description="Reject empty tag and attribute names",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Preset that accepts empty names such as ``<>text</>``."""
        return cls(
            allow_empty_names=True,
            name="lenient",
            description="Accept empty tag and attribute names",
        )

    @classmethod
    def from_preset(cls, preset: str) -> "ParserConfig":
        presets = {"strict": cls.strict, "lenient": cls.lenient}
        if not isinstance(preset, str) or preset not in presets:
            raise ConfigValidationError(
                f"Unknown preset {preset!r}",
                suggestions=sorted(presets),
            )
        return presets[preset]()
