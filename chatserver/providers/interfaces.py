"""Typed interfaces for identity provider responsibilities."""

from __future__ import annotations

from typing import Any, Callable, Protocol

from chatserver.config import SSOSettings


class IdentityProviderPort(Protocol):
    """Port definition for a pluggable third-party authentication provider."""

    def provider_display_name(self) -> str:
        """Return the human-readable provider name shown on sign-in pages.

        Returns:
            str: Display name.

        Raises:
            RuntimeError: Raised when provider metadata is unavailable.
        """

    def provider_build_authorize_url(self, state: str, redirect_uri: str) -> str:
        """Build the authorization URL the browser is redirected to.

        Args:
            state: Opaque anti-forgery state value.
            redirect_uri: Callback URL registered with the provider.

        Returns:
            str: Absolute authorization URL.

        Raises:
            ValueError: Raised when the provider has no authorization endpoint.
        """

    def provider_exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        """Exchange an authorization code for an access token payload.

        Args:
            code: Authorization code returned to the callback URL.
            redirect_uri: Callback URL used in the authorization request.

        Returns:
            dict[str, Any]: Token endpoint response payload.

        Raises:
            ProviderExchangeError: Raised when the token exchange fails.
        """


ProviderDefinitionDecoder = Callable[[str], tuple[str, IdentityProviderPort | None, SSOSettings]]
"""Decode one definition file into `(provider_name, provider_handle, settings)`."""
