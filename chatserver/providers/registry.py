"""Lock-guarded registry of identity provider handles keyed by name."""

from __future__ import annotations

import threading

from .interfaces import IdentityProviderPort


class IdentityProviderRegistry:
    """Name to provider mapping shared by the loader and request handlers.

    Entries are only added or overwritten, never removed. Reads may run
    concurrently with registration.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._providers: dict[str, IdentityProviderPort] = {}

    def provider_register(self, provider_name: str, provider: IdentityProviderPort) -> None:
        """Register or replace the provider stored under `provider_name`.

        Args:
            provider_name: Registry key.
            provider: Provider handle.

        Raises:
            ValueError: Raised when the name is blank or the provider is None.
        """

        if not provider_name.strip():
            raise ValueError("provider_name must not be blank")
        if provider is None:
            raise ValueError("provider must not be None")
        with self._lock:
            self._providers[provider_name] = provider

    def provider_merge(self, other: IdentityProviderRegistry) -> None:
        """Copy every entry of `other` into this registry, overwriting by name."""

        with other._lock:
            staged = dict(other._providers)
        with self._lock:
            self._providers.update(staged)

    def provider_get(self, provider_name: str) -> IdentityProviderPort | None:
        with self._lock:
            return self._providers.get(provider_name)

    def provider_names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._providers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)
