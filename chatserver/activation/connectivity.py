"""Startup smoke-tests against external dependencies named by the configuration.

Checks never raise: each failure is logged and reported as a `down` status
so a slow or missing dependency cannot block startup.
"""

from __future__ import annotations

import logging
import os
from typing import Callable

import httpx
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from chatserver.config import FILE_DRIVER_LOCAL, FILE_DRIVER_S3, Configuration, FileSettings, SqlSettings
from chatserver.db import SQLAlchemyDatabaseHealthService, db_create_engine
from chatserver.domain import ConnectivityStatus

logger = logging.getLogger(__name__)

EngineFactory = Callable[[str, float], Engine]


class ConnectivityChecker:
    """Bounded-timeout connectivity checks for the database and file storage."""

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        engine_factory: EngineFactory = db_create_engine,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize connectivity checker.

        Args:
            timeout_seconds: Upper bound for each check.
            engine_factory: Builds an engine from `(database_url, timeout_seconds)`.
            transport: Optional `httpx` transport override for storage checks.

        Raises:
            ValueError: Raised when timeout is not positive.
        """

        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        self._timeout_seconds = timeout_seconds
        self._engine_factory = engine_factory
        self._transport = transport

    def activation_test_connections(self, configuration: Configuration) -> list[ConnectivityStatus]:
        """Probe every external dependency and log failures.

        Args:
            configuration: Validated configuration.

        Returns:
            list[ConnectivityStatus]: One status per checked dependency.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        statuses = [
            self.activation_check_database(configuration.sql_settings),
            self.activation_check_file_storage(configuration.file_settings),
        ]
        for connectivity_status in statuses:
            if connectivity_status.is_ok:
                logger.debug("Connectivity check %s ok: %s", connectivity_status.target, connectivity_status.detail)
            else:
                logger.warning(
                    "Connectivity check %s failed for %s: %s",
                    connectivity_status.target,
                    connectivity_status.label,
                    connectivity_status.detail,
                )
        return statuses

    def activation_check_database(self, sql_settings: SqlSettings) -> ConnectivityStatus:
        try:
            engine = self._engine_factory(sql_settings.data_source, self._timeout_seconds)
        except (SQLAlchemyError, ImportError, ValueError) as error:
            return ConnectivityStatus(
                target="database",
                status="down",
                detail=f"database engine could not be created: {error}",
                label=sql_settings.driver_name,
            )

        health_service = SQLAlchemyDatabaseHealthService(engine=engine)
        try:
            return health_service.db_check_health()
        except ConnectionError as error:
            return ConnectivityStatus(
                target="database",
                status="down",
                detail=f"{error}: {error.__cause__}" if error.__cause__ else str(error),
                label=health_service.db_connection_label(),
            )
        finally:
            engine.dispose()

    def activation_check_file_storage(self, file_settings: FileSettings) -> ConnectivityStatus:
        if file_settings.driver_name == FILE_DRIVER_LOCAL:
            return _check_local_directory(file_settings.directory)
        if file_settings.driver_name == FILE_DRIVER_S3:
            return self._check_s3_endpoint(file_settings)
        return ConnectivityStatus(
            target="file_storage",
            status="down",
            detail=f"unsupported file driver {file_settings.driver_name}",
            label=file_settings.driver_name,
        )

    def _check_s3_endpoint(self, file_settings: FileSettings) -> ConnectivityStatus:
        endpoint = activation_s3_endpoint(file_settings)
        try:
            with httpx.Client(timeout=self._timeout_seconds, transport=self._transport) as client:
                response = client.head(endpoint)
        except httpx.HTTPError as error:
            return ConnectivityStatus(
                target="file_storage",
                status="down",
                detail=f"storage endpoint unreachable: {error}",
                label=endpoint,
            )

        # Unauthenticated HEAD answers 403 from a healthy bucket.
        if response.status_code >= 500:
            return ConnectivityStatus(
                target="file_storage",
                status="down",
                detail=f"storage endpoint returned HTTP {response.status_code}",
                label=endpoint,
            )
        return ConnectivityStatus(
            target="file_storage",
            status="ok",
            detail=f"storage endpoint answered HTTP {response.status_code}",
            label=endpoint,
        )


def activation_s3_endpoint(file_settings: FileSettings) -> str:
    """Return the bucket URL checked for the `amazons3` driver."""

    if file_settings.amazon_s3_endpoint:
        return file_settings.amazon_s3_endpoint
    if file_settings.amazon_s3_region:
        return f"https://{file_settings.amazon_s3_bucket}.s3.{file_settings.amazon_s3_region}.amazonaws.com"
    return f"https://{file_settings.amazon_s3_bucket}.s3.amazonaws.com"


def _check_local_directory(directory: str) -> ConnectivityStatus:
    if not os.path.isdir(directory):
        return ConnectivityStatus(
            target="file_storage",
            status="down",
            detail="storage directory does not exist",
            label=directory,
        )
    if not os.access(directory, os.W_OK):
        return ConnectivityStatus(
            target="file_storage",
            status="down",
            detail="storage directory is not writable",
            label=directory,
        )
    return ConnectivityStatus(
        target="file_storage",
        status="ok",
        detail="storage directory writable",
        label=directory,
    )
