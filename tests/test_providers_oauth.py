"""Tests for the generic OAuth2 provider and its definition file decoder."""

from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from pydantic import ValidationError

from chatserver.config import SSOSettings
from chatserver.providers import OAuthProvider, ProviderExchangeError, oauth_load_provider_from_file


def _build_settings(**overrides: object) -> SSOSettings:
    values: dict[str, object] = {
        "enable": True,
        "id": "chat-client",
        "secret": "chat-secret",
        "scope": "openid profile",
        "auth_endpoint": "https://sso.example.test/authorize",
        "token_endpoint": "https://sso.example.test/token",
        "user_api_endpoint": "https://sso.example.test/user",
    }
    values.update(overrides)
    return SSOSettings(**values)


def _build_provider(handler, display_name: str = "Company SSO") -> OAuthProvider:
    return OAuthProvider(
        name="keycloak",
        display_name=display_name,
        settings=_build_settings(),
        transport=httpx.MockTransport(handler),
    )


def test_oauth_load_provider_from_file_decodes_definition(tmp_path: Path) -> None:
    """Decode name, display name and settings from one definition file.

    Returns:
        None: Assertions validate decoded provider content.

    Raises:
        AssertionError: Raised when decoded values differ from the file.
    """

    definition_file = tmp_path / "keycloak.json"
    definition_file.write_text(
        json.dumps(
            {
                "Name": "keycloak",
                "DisplayName": "Company SSO",
                "Settings": {
                    "Enable": True,
                    "Id": "chat-client",
                    "Secret": "chat-secret",
                    "TokenEndpoint": "https://sso.example.test/token",
                },
            }
        ),
        encoding="utf-8",
    )

    name, provider, settings = oauth_load_provider_from_file(str(definition_file))

    assert name == "keycloak"
    assert provider.provider_display_name() == "Company SSO"
    assert settings.enable is True
    assert settings.token_endpoint == "https://sso.example.test/token"
    assert provider.settings == settings


def test_oauth_load_provider_from_file_rejects_wrong_types(tmp_path: Path) -> None:
    definition_file = tmp_path / "broken.json"
    definition_file.write_text(json.dumps({"Name": "x", "Settings": {"Enable": "yes"}}), encoding="utf-8")

    with pytest.raises(ValidationError):
        oauth_load_provider_from_file(str(definition_file))


def test_oauth_load_provider_from_file_missing_file_is_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        oauth_load_provider_from_file(str(tmp_path / "missing.json"))


def test_oauth_provider_display_name_falls_back_to_name() -> None:
    provider = OAuthProvider(name="keycloak", display_name="", settings=_build_settings())

    assert provider.provider_display_name() == "keycloak"


def test_oauth_provider_build_authorize_url_carries_client_parameters() -> None:
    """Build an authorization URL with client id, state, redirect and scope."""

    provider = OAuthProvider(name="keycloak", display_name="Company SSO", settings=_build_settings())

    url = provider.provider_build_authorize_url("state-1", "https://chat.example.test/signup/keycloak/complete")

    parsed = urlsplit(url)
    query = parse_qs(parsed.query)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://sso.example.test/authorize"
    assert query["response_type"] == ["code"]
    assert query["client_id"] == ["chat-client"]
    assert query["state"] == ["state-1"]
    assert query["redirect_uri"] == ["https://chat.example.test/signup/keycloak/complete"]
    assert query["scope"] == ["openid profile"]


def test_oauth_provider_build_authorize_url_requires_endpoint() -> None:
    provider = OAuthProvider(name="keycloak", display_name="", settings=_build_settings(auth_endpoint=""))

    with pytest.raises(ValueError, match="AuthEndpoint"):
        provider.provider_build_authorize_url("state", "https://chat.example.test/complete")


def test_oauth_provider_exchange_code_posts_form_and_returns_token() -> None:
    """Post the authorization code as a form and return the token payload.

    Returns:
        None: Assertions validate request content and response handling.

    Raises:
        AssertionError: Raised when request or response mapping is wrong.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"access_token": "token-1", "token_type": "bearer"})

    payload = _build_provider(_handler).provider_exchange_code("code-1", "https://chat.example.test/complete")

    assert payload["access_token"] == "token-1"
    assert len(captured_requests) == 1
    request = captured_requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://sso.example.test/token"
    form = parse_qs(request.content.decode("utf-8"))
    assert form["grant_type"] == ["authorization_code"]
    assert form["code"] == ["code-1"]
    assert form["client_id"] == ["chat-client"]
    assert form["client_secret"] == ["chat-secret"]


def test_oauth_provider_exchange_code_maps_error_status() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(400, json={"error": "invalid_grant"})

    with pytest.raises(ProviderExchangeError) as error_info:
        _build_provider(_handler).provider_exchange_code("code-1", "https://chat.example.test/complete")

    assert error_info.value.source == "keycloak"


def test_oauth_provider_exchange_code_maps_transport_failure() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderExchangeError):
        _build_provider(_handler).provider_exchange_code("code-1", "https://chat.example.test/complete")


def test_oauth_provider_exchange_code_requires_access_token() -> None:
    """Reject a successful response that carries no access token."""

    def _handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(200, json={"token_type": "bearer"})

    with pytest.raises(ProviderExchangeError, match="access_token"):
        _build_provider(_handler).provider_exchange_code("code-1", "https://chat.example.test/complete")
