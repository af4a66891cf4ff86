"""Injectable configuration service owning the published configuration state.

The service runs the full pipeline (resolve, decode, default, validate,
load providers, activate, project) and publishes the result as one immutable
snapshot. Readers never take a lock: they dereference the current snapshot,
which is replaced wholesale by a successful reload.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass

from chatserver.activation import ConnectivityChecker, activation_configure_logging
from chatserver.config import (
    Configuration,
    ConfigNotLoadedError,
    config_load_file,
    config_save_file,
)
from chatserver.domain import BuildInfo, ConnectivityStatus
from chatserver.projection import ClientProjection, projection_build_client
from chatserver.providers import (
    IdentityProviderRegistry,
    ProviderDefinitionDecoder,
    ProviderLoadError,
    oauth_load_provider_from_file,
    provider_load_directory,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishedConfiguration:
    """Snapshot produced by one successful load cycle.

    Attributes:
        configuration: Validated configuration.
        client_projection: Projection derived from `configuration`.
        file_name: Resolved path the configuration was loaded from.
        last_modified: Source modification time in Unix seconds.
        connectivity: Smoke-test results gathered during activation.
    """

    configuration: Configuration
    client_projection: ClientProjection
    file_name: str
    last_modified: int
    connectivity: tuple[ConnectivityStatus, ...] = ()


class ConfigurationService:
    """Owner of the live configuration, its projection and the provider registry."""

    def __init__(
        self,
        file_name: str,
        registry: IdentityProviderRegistry,
        connectivity_checker: ConnectivityChecker,
        build_info: BuildInfo,
        provider_decoder: ProviderDefinitionDecoder = oauth_load_provider_from_file,
        logger_name: str = "chatserver",
    ):
        """Initialize configuration service.

        Args:
            file_name: Logical config file name used by `config_reload`.
            registry: Identity provider registry shared with request handlers.
            connectivity_checker: Smoke-test runner used during activation.
            build_info: Build metadata published in the client projection.
            provider_decoder: Provider definition file decoder.
            logger_name: Logger receiving the configured sinks.

        Raises:
            ValueError: Raised when file_name is blank.
        """

        if not file_name.strip():
            raise ValueError("file_name must not be blank")
        self._file_name = file_name
        self._registry = registry
        self._connectivity_checker = connectivity_checker
        self._build_info = build_info
        self._provider_decoder = provider_decoder
        self._logger_name = logger_name
        self._reload_lock = threading.Lock()
        self._published: PublishedConfiguration | None = None

    @property
    def registry(self) -> IdentityProviderRegistry:
        return self._registry

    def config_reload(self, file_name: str | None = None) -> Configuration:
        """Run the load pipeline and publish its result.

        On failure the previously published snapshot stays live.

        Args:
            file_name: Optional config file overriding the service default.

        Returns:
            Configuration: Newly published configuration.

        Raises:
            ConfigLoadError: Raised when the file cannot be read, decoded or validated.
            ProviderConsistencyError: Raised when provider loading is internally inconsistent.
            ActivationError: Raised when the configured log sinks cannot be opened.
        """

        with self._reload_lock:
            loaded = config_load_file(file_name or self._file_name)
            configuration = loaded.configuration

            # Providers are staged and only reach the shared registry once the cycle succeeds.
            staged_registry = IdentityProviderRegistry()
            try:
                configuration = provider_load_directory(
                    configuration,
                    staged_registry,
                    decoder=self._provider_decoder,
                )
            except ProviderLoadError as error:
                logger.info("Error loading oauth providers: %s", error)
                if error.configuration is not None:
                    configuration = error.configuration

            activation_configure_logging(configuration.log_settings, logger_name=self._logger_name)
            connectivity = self._connectivity_checker.activation_test_connections(configuration)

            self._registry.provider_merge(staged_registry)
            self._published = PublishedConfiguration(
                configuration=configuration,
                client_projection=projection_build_client(configuration, self._registry, self._build_info),
                file_name=loaded.file_name,
                last_modified=loaded.last_modified,
                connectivity=tuple(connectivity),
            )
            logger.info("Published configuration from %s", loaded.file_name)
            return configuration

    def config_published(self) -> PublishedConfiguration:
        """Return the current snapshot.

        Raises:
            ConfigNotLoadedError: Raised before the first successful load.
        """

        published = self._published
        if published is None:
            raise ConfigNotLoadedError("configuration has not been loaded")
        return published

    def config_current(self) -> Configuration:
        return self.config_published().configuration

    def config_client_projection(self) -> ClientProjection:
        return self.config_published().client_projection

    def config_source_changed(self) -> bool:
        """Report whether the source file was modified after the last load.

        Returns:
            bool: True when the file's mtime differs from the recorded one or
            the file is gone.

        Raises:
            ConfigNotLoadedError: Raised before the first successful load.
        """

        published = self.config_published()
        try:
            current_mtime = int(os.stat(published.file_name).st_mtime)
        except OSError:
            return True
        return current_mtime != published.last_modified

    def config_save(self, configuration: Configuration, file_name: str | None = None) -> str:
        """Persist a configuration, by default over the published source file.

        The live snapshot is not touched; call `config_reload` to publish.

        Returns:
            str: Path written.

        Raises:
            ConfigNotLoadedError: Raised when no file name is given before the first load.
            ConfigSaveError: Raised when the file cannot be written.
        """

        target_file_name = file_name or self.config_published().file_name
        config_save_file(target_file_name, configuration)
        return target_file_name
