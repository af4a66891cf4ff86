"""Project-native typed exceptions for identity provider loading and exchange."""

from __future__ import annotations

from typing import Any


class ProviderError(Exception):
    """Base exception for identity provider failures.

    Attributes:
        source: File, directory or provider name involved in the failure.
    """

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class ProviderLoadError(ProviderError, RuntimeError):
    """Provider directory or definition file could not be read or decoded.

    Attributes:
        configuration: Configuration including providers merged before the
            failing file, or None when nothing was merged.
    """

    def __init__(self, message: str, source: str | None = None, configuration: Any = None):
        super().__init__(message, source=source)
        self.configuration = configuration


class ProviderConsistencyError(ProviderError, RuntimeError):
    """Decoder reported success for an enabled provider but produced no handle."""


class ProviderExchangeError(ProviderError, ConnectionError):
    """Authorization code exchange with the provider token endpoint failed."""
