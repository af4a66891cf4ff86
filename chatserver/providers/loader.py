"""Extension loading of identity provider definition files."""

from __future__ import annotations

import logging
from pathlib import Path

from chatserver.config import Configuration, SSOSettings

from .errors import ProviderConsistencyError, ProviderLoadError
from .interfaces import ProviderDefinitionDecoder
from .oauth_provider import oauth_load_provider_from_file
from .registry import IdentityProviderRegistry

logger = logging.getLogger(__name__)


def provider_load_directory(
    configuration: Configuration,
    registry: IdentityProviderRegistry,
    decoder: ProviderDefinitionDecoder = oauth_load_provider_from_file,
) -> Configuration:
    """Register enabled providers found in `OAuthConfigDir`.

    Files matching `*.json` are processed in name order. Disabled providers
    are skipped. The first unreadable or malformed file aborts the whole
    directory; providers registered before it stay registered and the
    raised error carries the configuration merged so far.

    Args:
        configuration: Validated configuration naming the provider directory.
        registry: Registry receiving enabled provider handles.
        decoder: Definition file decoder returning `(name, handle, settings)`.

    Returns:
        Configuration: Configuration with enabled provider settings merged into
        `oauth_settings`, or the input unchanged when nothing was enabled.

    Raises:
        ProviderLoadError: Raised when the directory cannot be listed or a file
            cannot be decoded.
        ProviderConsistencyError: Raised when the decoder returns no handle for
            an enabled provider.
    """

    config_dir = configuration.oauth_config_dir
    if not config_dir:
        return configuration

    directory = Path(config_dir)
    if not directory.is_dir():
        raise ProviderLoadError(
            f"Error looking for oauth provider files in {config_dir}: not a directory",
            source=config_dir,
        )
    try:
        provider_files = sorted(directory.glob("*.json"))
    except OSError as error:
        raise ProviderLoadError(
            f"Error looking for oauth provider files in {config_dir}: {error}",
            source=config_dir,
        ) from error

    oauth_settings: dict[str, SSOSettings] | None = (
        dict(configuration.oauth_settings) if configuration.oauth_settings is not None else None
    )
    for provider_file in provider_files:
        file_path = str(provider_file)
        try:
            provider_name, provider, settings = decoder(file_path)
        except (OSError, ValueError) as error:
            raise ProviderLoadError(
                f"Error loading oauth provider settings from {file_path}: {error}",
                source=file_path,
                configuration=_merge_oauth_settings(configuration, oauth_settings),
            ) from error

        if not settings.enable:
            logger.debug("Skipping disabled oauth provider %s from %s", provider_name, file_path)
            continue
        if provider is None:
            raise ProviderConsistencyError(
                f"Internal OAuth provider missing after load from settings file={file_path}",
                source=file_path,
            )

        if oauth_settings is None:
            oauth_settings = {}
        oauth_settings[provider_name] = settings
        registry.provider_register(provider_name, provider)
        logger.info("Registered oauth provider %s from %s", provider_name, file_path)

    return _merge_oauth_settings(configuration, oauth_settings)


def _merge_oauth_settings(
    configuration: Configuration,
    oauth_settings: dict[str, SSOSettings] | None,
) -> Configuration:
    if oauth_settings is None:
        return configuration
    return configuration.model_copy(update={"oauth_settings": dict(oauth_settings)})
