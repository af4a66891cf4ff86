"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or runs a one-shot configuration command.
"""

import argparse
import sys

import uvicorn

from chatserver.activation import ActivationError, activation_configure_command_line_logging
from chatserver.bootstrap import bootstrap_create_application
from chatserver.config import (
    ConfigLoadError,
    Configuration,
    SettingsLoadError,
    config_load_file,
    config_load_settings,
    config_resolve_file,
)
from chatserver.domain import domain_load_build_info
from chatserver.projection import projection_build_client, projection_to_json
from chatserver.providers import (
    IdentityProviderRegistry,
    ProviderConsistencyError,
    ProviderLoadError,
    provider_load_directory,
)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with status 1 when the configuration must not become live.
    """

    argument_parser = argparse.ArgumentParser(description="Chat server runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "check-config", "client-config"),
        help="Runtime command: `api` starts server, `check-config` validates the config file, "
        "`client-config` prints the client configuration JSON",
        type=str,
    )
    argument_parser.add_argument(
        "--config",
        dest="config_file_name",
        type=str,
        help="Optional config file name overriding CONFIG_FILE_NAME",
    )
    parsed_arguments = argument_parser.parse_args()

    try:
        settings = config_load_settings()
        config_file_name = parsed_arguments.config_file_name or settings.config_file_name

        if parsed_arguments.command == "check-config":
            activation_configure_command_line_logging()
            main_load_with_providers(config_file_name)
            print(f"Config file {config_resolve_file(config_file_name)} is valid")
            return

        if parsed_arguments.command == "client-config":
            activation_configure_command_line_logging()
            print(main_render_client_config(config_file_name))
            return

        bootstrapped = bootstrap_create_application(settings, config_file_name=config_file_name)
    except (SettingsLoadError, ConfigLoadError, ProviderConsistencyError, ActivationError) as error:
        print(str(error), file=sys.stderr)
        raise SystemExit(1) from error

    uvicorn.run(
        bootstrapped.application,
        host=bootstrapped.host,
        port=bootstrapped.port,
    )


def main_load_with_providers(config_file_name: str) -> tuple[Configuration, IdentityProviderRegistry]:
    """Load a config file and its identity providers without activation.

    Provider directory errors are reported on stderr and do not fail the load.

    Args:
        config_file_name: Logical or explicit config file name.

    Returns:
        tuple[Configuration, IdentityProviderRegistry]: Configuration with
        merged providers and the throwaway registry holding their handles.

    Raises:
        ConfigLoadError: Raised when the configuration is invalid.
        ProviderConsistencyError: Raised when provider loading is inconsistent.
    """

    registry = IdentityProviderRegistry()
    configuration = config_load_file(config_file_name).configuration
    try:
        configuration = provider_load_directory(configuration, registry)
    except ProviderLoadError as error:
        print(f"Error loading oauth providers: {error}", file=sys.stderr)
        if error.configuration is not None:
            configuration = error.configuration
    return configuration, registry


def main_render_client_config(config_file_name: str) -> str:
    """Load a config file and render its client projection without activation.

    Args:
        config_file_name: Logical or explicit config file name.

    Returns:
        str: Client projection JSON.

    Raises:
        ConfigLoadError: Raised when the configuration is invalid.
        ProviderConsistencyError: Raised when provider loading is inconsistent.
    """

    configuration, registry = main_load_with_providers(config_file_name)
    return projection_to_json(projection_build_client(configuration, registry, domain_load_build_info()))


if __name__ == "__main__":
    main()
