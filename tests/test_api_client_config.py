"""Tests for the client configuration endpoint."""

import json
import uuid
from pathlib import Path

from fastapi.testclient import TestClient

from chatserver.activation import activation_reset_logging
from chatserver.api.application import create_api_application
from chatserver.config import AppSettings, Configuration
from chatserver.domain import BuildInfo, ConnectivityStatus
from chatserver.providers import IdentityProviderRegistry
from chatserver.service import ConfigurationService


class _NoopConnectivityChecker:
    def activation_test_connections(self, configuration: Configuration) -> list[ConnectivityStatus]:
        _ = configuration
        return []


def _build_service(tmp_path: Path) -> tuple[ConfigurationService, str]:
    """Create a service over a config with one identity provider.

    Args:
        tmp_path: Temporary directory.

    Returns:
        tuple[ConfigurationService, str]: Unloaded service and its logger name.
    """

    provider_directory = tmp_path / "oauth"
    provider_directory.mkdir()
    (provider_directory / "keycloak.json").write_text(
        json.dumps(
            {
                "Name": "keycloak",
                "DisplayName": "Company SSO",
                "Settings": {"Enable": True, "Secret": "provider-secret-value"},
            }
        ),
        encoding="utf-8",
    )
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "ServiceSettings": {"ListenAddress": ":8065"},
                "TeamSettings": {"SiteName": "Chat"},
                "SqlSettings": {"DriverName": "postgres", "DataSource": "postgresql+psycopg://chat:db-secret@db/chat"},
                "FileSettings": {"DriverName": "local", "Directory": "uploads"},
                "EmailSettings": {"SMTPPassword": "smtp-secret-value"},
                "LogSettings": {"EnableConsole": False},
                "OAuthConfigDir": str(provider_directory),
            }
        ),
        encoding="utf-8",
    )
    logger_name = f"chatserver-test-{uuid.uuid4().hex}"
    service = ConfigurationService(
        file_name=str(config_file),
        registry=IdentityProviderRegistry(),
        connectivity_checker=_NoopConnectivityChecker(),
        build_info=BuildInfo("2.0.0", "7", "today", "abc", True),
        logger_name=logger_name,
    )
    return service, logger_name


def _build_client(service: ConfigurationService) -> TestClient:
    application = create_api_application(
        settings=AppSettings(environment_name="test"),
        configuration_service=service,
        connectivity_checker=_NoopConnectivityChecker(),
    )
    return TestClient(application)


def test_api_client_config_returns_projection(tmp_path: Path) -> None:
    """Serve the flat client projection after a successful load.

    Returns:
        None: Assertions validate response payload.

    Raises:
        AssertionError: Raised when the payload differs or leaks secrets.
    """

    service, logger_name = _build_service(tmp_path)
    service.config_reload()
    activation_reset_logging(logger_name)

    response = _build_client(service).get("/api/v1/config/client")

    assert response.status_code == 200
    payload = response.json()
    assert payload["SiteName"] == "Chat"
    assert payload["Version"] == "2.0.0"
    assert payload["BuildEnterpriseReady"] == "true"
    assert payload["EnableSignUpWithOAuth"] == "true"
    assert payload["OAuthProviderDisplayNames"] == ["Company SSO"]
    for secret in ("provider-secret-value", "db-secret", "smtp-secret-value"):
        assert secret not in response.text


def test_api_client_config_returns_503_before_first_load(tmp_path: Path) -> None:
    service, _ = _build_service(tmp_path)

    response = _build_client(service).get("/api/v1/config/client")

    assert response.status_code == 503
    assert response.json() == {"status": "error", "message": "configuration not loaded"}
