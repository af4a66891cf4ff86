"""Generic OAuth2 identity provider defined by a JSON definition file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from chatserver.config import SSOSettings

from .errors import ProviderExchangeError
from .interfaces import IdentityProviderPort

_EXCHANGE_TIMEOUT_SECONDS: Final[float] = 10.0


class ProviderDefinition(BaseModel):
    """On-disk provider definition.

    Example file content::

        {
            "Name": "keycloak",
            "DisplayName": "Company SSO",
            "Settings": {"Enable": true, "Id": "...", "Secret": "...",
                         "AuthEndpoint": "...", "TokenEndpoint": "...",
                         "UserApiEndpoint": "..."}
        }
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True, strict=True)

    name: str = Field(min_length=1)
    display_name: str = ""
    settings: SSOSettings


@dataclass(frozen=True)
class OAuthProvider(IdentityProviderPort):
    """OAuth2 authorization-code provider handle.

    Attributes:
        name: Registry key, also used in callback routes.
        display_name: Label rendered on the sign-in page.
        settings: Client credentials and endpoints.
        transport: Optional `httpx` transport override for the token exchange.
    """

    name: str
    display_name: str
    settings: SSOSettings
    transport: httpx.BaseTransport | None = field(default=None, compare=False, repr=False)

    def provider_display_name(self) -> str:
        return self.display_name or self.name

    def provider_build_authorize_url(self, state: str, redirect_uri: str) -> str:
        if not self.settings.auth_endpoint:
            raise ValueError(f"provider {self.name} has no AuthEndpoint")

        params = {
            "response_type": "code",
            "client_id": self.settings.id,
            "redirect_uri": redirect_uri,
            "state": state,
        }
        if self.settings.scope:
            params["scope"] = self.settings.scope
        return str(httpx.URL(self.settings.auth_endpoint, params=params))

    def provider_exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        """Exchange an authorization code at the provider token endpoint.

        Args:
            code: Authorization code returned to the callback URL.
            redirect_uri: Callback URL used in the authorization request.

        Returns:
            dict[str, Any]: Token payload containing at least `access_token`.

        Raises:
            ProviderExchangeError: Raised on transport failure, non-2xx status or
                a response without an access token.
        """

        form = {
            "grant_type": "authorization_code",
            "client_id": self.settings.id,
            "client_secret": self.settings.secret,
            "code": code,
            "redirect_uri": redirect_uri,
        }
        try:
            with httpx.Client(timeout=_EXCHANGE_TIMEOUT_SECONDS, transport=self.transport) as client:
                response = client.post(
                    self.settings.token_endpoint,
                    data=form,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as error:
            raise ProviderExchangeError(
                f"token exchange with provider {self.name} failed: {error}",
                source=self.name,
            ) from error
        except ValueError as error:
            raise ProviderExchangeError(
                f"token endpoint of provider {self.name} returned invalid JSON",
                source=self.name,
            ) from error

        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise ProviderExchangeError(
                f"token endpoint of provider {self.name} returned no access_token",
                source=self.name,
            )
        return payload


def oauth_load_provider_from_file(file_path: str) -> tuple[str, OAuthProvider, SSOSettings]:
    """Decode one provider definition file.

    Args:
        file_path: Path of a JSON provider definition.

    Returns:
        tuple[str, OAuthProvider, SSOSettings]: Provider name, handle and settings.

    Raises:
        OSError: Raised when the file cannot be read.
        ValueError: Raised when the file does not match the definition schema.
    """

    definition = ProviderDefinition.model_validate_json(Path(file_path).read_bytes())
    provider = OAuthProvider(
        name=definition.name,
        display_name=definition.display_name,
        settings=definition.settings,
    )
    return definition.name, provider, definition.settings
