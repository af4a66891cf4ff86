"""Project-native typed exceptions for configuration pipeline failures."""

from __future__ import annotations


class ConfigLoadError(RuntimeError):
    """Base exception for configuration files that must not become live.

    Attributes:
        file_name: Resolved configuration file path.
        field_name: Dotted JSON path of the offending field, when known.
    """

    def __init__(self, message: str, file_name: str, field_name: str | None = None):
        super().__init__(message)
        self.file_name = file_name
        self.field_name = field_name


class ConfigFileError(ConfigLoadError):
    """Configuration file could not be opened or inspected."""


class ConfigDecodeError(ConfigLoadError, ValueError):
    """Configuration file is malformed or does not match the schema."""


class ConfigValidationError(ConfigLoadError, ValueError):
    """Decoded configuration violates a semantic constraint."""


class ConfigSaveError(RuntimeError):
    """Configuration could not be serialized or persisted.

    Attributes:
        file_name: Target file path.
    """

    def __init__(self, message: str, file_name: str):
        super().__init__(message)
        self.file_name = file_name


class ConfigNotLoadedError(RuntimeError):
    """Published configuration was read before the first successful load."""
