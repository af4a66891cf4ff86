"""Project-native typed exceptions for subsystem activation failures."""

from __future__ import annotations


class ActivationError(RuntimeError):
    """A validated configuration could not be activated.

    Attributes:
        target: Resource that failed, for example the log file path.
        field_name: Dotted JSON path of the setting naming the resource.
    """

    def __init__(self, message: str, target: str, field_name: str | None = None):
        super().__init__(message)
        self.target = target
        self.field_name = field_name
