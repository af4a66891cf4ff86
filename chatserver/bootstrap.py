"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import FastAPI

from chatserver.activation import ConnectivityChecker
from chatserver.api import create_api_application
from chatserver.config import AppSettings, Configuration
from chatserver.domain import domain_load_build_info
from chatserver.providers import IdentityProviderRegistry
from chatserver.service import ConfigurationService


@dataclass(frozen=True)
class BootstrappedApplication:
    """Loaded application and the listen endpoint it should be served on.

    Attributes:
        application: FastAPI application.
        configuration_service: Service holding the published configuration.
        host: Bind host derived from `ServiceSettings.ListenAddress`.
        port: Bind port derived from `ServiceSettings.ListenAddress`.
    """

    application: FastAPI
    configuration_service: ConfigurationService
    host: str
    port: int


def bootstrap_create_configuration_service(
    settings: AppSettings,
    config_file_name: str | None = None,
    connectivity_checker: ConnectivityChecker | None = None,
) -> ConfigurationService:
    """Assemble a configuration service without loading it.

    Args:
        settings: Validated process settings.
        config_file_name: Optional override of `settings.config_file_name`.
        connectivity_checker: Optional smoke-test runner override.

    Returns:
        ConfigurationService: Service ready for `config_reload`.

    Raises:
        ValueError: Raised when the config file name is blank.
    """

    return ConfigurationService(
        file_name=config_file_name or settings.config_file_name,
        registry=IdentityProviderRegistry(),
        connectivity_checker=connectivity_checker
        or ConnectivityChecker(timeout_seconds=settings.connectivity_timeout_seconds),
        build_info=domain_load_build_info(),
    )


def bootstrap_create_application(
    settings: AppSettings,
    config_file_name: str | None = None,
) -> BootstrappedApplication:
    """Load the configuration and assemble the runtime application.

    Args:
        settings: Validated process settings.
        config_file_name: Optional override of `settings.config_file_name`.

    Returns:
        BootstrappedApplication: Application with its bind endpoint.

    Raises:
        ConfigLoadError: Raised when the configuration must not become live.
        ProviderConsistencyError: Raised when provider loading is inconsistent.
        ActivationError: Raised when the configured log sinks cannot be opened.
    """

    connectivity_checker = ConnectivityChecker(timeout_seconds=settings.connectivity_timeout_seconds)
    configuration_service = bootstrap_create_configuration_service(
        settings,
        config_file_name=config_file_name,
        connectivity_checker=connectivity_checker,
    )
    configuration = configuration_service.config_reload()
    host, port = bootstrap_parse_listen_address(configuration)
    application = create_api_application(
        settings=settings,
        configuration_service=configuration_service,
        connectivity_checker=connectivity_checker,
    )
    return BootstrappedApplication(
        application=application,
        configuration_service=configuration_service,
        host=host,
        port=port,
    )


def bootstrap_parse_listen_address(configuration: Configuration) -> tuple[str, int]:
    """Split `ServiceSettings.ListenAddress` into bind host and port.

    `:8065` binds every interface; `[::1]:8065` is accepted for IPv6.

    Args:
        configuration: Validated configuration.

    Returns:
        tuple[str, int]: Bind host and port.

    Raises:
        ValueError: Raised when the address has no valid port.
    """

    listen_address = configuration.service_settings.listen_address.strip()
    host, separator, port_text = listen_address.rpartition(":")
    if not separator or not port_text.isdigit():
        raise ValueError(f"ServiceSettings.ListenAddress {listen_address!r} must be [host]:port")
    port = int(port_text)
    if not 1 <= port <= 65535:
        raise ValueError(f"ServiceSettings.ListenAddress port {port} is out of range")
    host = host.strip("[]") or "0.0.0.0"
    return host, port
