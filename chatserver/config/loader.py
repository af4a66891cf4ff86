"""Configuration file decoding, defaulting, validation and persistence.

`config_load_file` is fail-fast: every failure raises a `ConfigLoadError`
subclass and nothing partially decoded is ever returned.
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from typing import Final

from pydantic import ValidationError
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .errors import ConfigDecodeError, ConfigFileError, ConfigSaveError, ConfigValidationError
from .models import (
    CONN_SECURITY_MODES,
    DATABASE_DRIVERS,
    FILE_DRIVER_LOCAL,
    FILE_DRIVERS,
    Configuration,
)
from .paths import config_resolve_file

logger = logging.getLogger(__name__)

_SALT_LENGTH: Final[int] = 32
_SAVE_FILE_MODE: Final[int] = 0o644

DEFAULT_SUPPORT_EMAIL: Final[str] = "feedback@example.com"
DEFAULT_TERMS_OF_SERVICE_LINK: Final[str] = "/static/help/terms.html"
DEFAULT_PRIVACY_POLICY_LINK: Final[str] = "/static/help/privacy.html"
DEFAULT_ABOUT_LINK: Final[str] = "/static/help/about.html"
DEFAULT_HELP_LINK: Final[str] = "/static/help/help.html"
DEFAULT_REPORT_A_PROBLEM_LINK: Final[str] = "/static/help/report_problem.html"
DEFAULT_LDAP_PORT: Final[int] = 389
DEFAULT_SESSION_LENGTH_DAYS: Final[int] = 30
DEFAULT_SESSION_CACHE_MINUTES: Final[int] = 10


@dataclass(frozen=True)
class LoadedConfiguration:
    """Validated configuration together with its source file metadata.

    Attributes:
        configuration: Defaulted, validated and normalized configuration.
        file_name: Resolved path the configuration was read from.
        last_modified: Source file modification time in Unix seconds.
    """

    configuration: Configuration
    file_name: str
    last_modified: int


def config_load_file(file_name: str) -> LoadedConfiguration:
    """Resolve, decode, default, validate and normalize one config file.

    Args:
        file_name: Logical or explicit config file name.

    Returns:
        LoadedConfiguration: Configuration ready for publishing.

    Raises:
        ConfigFileError: Raised when the file cannot be opened or inspected.
        ConfigDecodeError: Raised when the file is malformed or mistyped.
        ConfigValidationError: Raised when a semantic constraint is violated.
    """

    resolved_file_name = config_resolve_file(file_name)

    try:
        with open(resolved_file_name, "rb") as config_file:
            raw_payload = config_file.read()
            last_modified = int(os.fstat(config_file.fileno()).st_mtime)
    except OSError as error:
        raise ConfigFileError(
            f"Error opening config file={resolved_file_name}, err={error}",
            file_name=resolved_file_name,
        ) from error

    configuration = config_decode(raw_payload, file_name=resolved_file_name)
    configuration = config_apply_defaults(configuration)
    config_validate(configuration, file_name=resolved_file_name)
    configuration = config_normalize(configuration)

    logger.debug("Loaded config file=%s", resolved_file_name)
    return LoadedConfiguration(
        configuration=configuration,
        file_name=resolved_file_name,
        last_modified=last_modified,
    )


def config_decode(raw_payload: bytes | str, file_name: str) -> Configuration:
    """Decode JSON payload into the configuration schema.

    Args:
        raw_payload: Raw config file content.
        file_name: Source path used in error messages.

    Returns:
        Configuration: Decoded configuration before defaulting.

    Raises:
        ConfigDecodeError: Raised on malformed JSON, type mismatch or missing required field.
    """

    try:
        return Configuration.model_validate_json(raw_payload)
    except ValidationError as error:
        first_error = error.errors()[0]
        field_name = ".".join(str(part) for part in first_error["loc"]) or None
        raise ConfigDecodeError(
            f"Error decoding config file={file_name}, field={field_name or '<root>'}, err={first_error['msg']}",
            file_name=file_name,
            field_name=field_name,
        ) from error


def config_apply_defaults(configuration: Configuration) -> Configuration:
    """Fill every unset optional field with its default.

    Args:
        configuration: Decoded configuration.

    Returns:
        Configuration: New configuration instance with no unset optional fields.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    service = configuration.service_settings
    team = configuration.team_settings
    sql = configuration.sql_settings
    files = configuration.file_settings
    email = configuration.email_settings
    support = configuration.support_settings
    ldap = configuration.ldap_settings

    return configuration.model_copy(
        update={
            "service_settings": service.model_copy(
                update={
                    "enable_developer": _default(service.enable_developer, False),
                    "enable_security_fix_alert": _default(service.enable_security_fix_alert, True),
                    "session_length_web_in_days": _default(
                        service.session_length_web_in_days, DEFAULT_SESSION_LENGTH_DAYS
                    ),
                    "session_length_mobile_in_days": _default(
                        service.session_length_mobile_in_days, DEFAULT_SESSION_LENGTH_DAYS
                    ),
                    "session_length_sso_in_days": _default(
                        service.session_length_sso_in_days, DEFAULT_SESSION_LENGTH_DAYS
                    ),
                    "session_cache_in_minutes": _default(
                        service.session_cache_in_minutes, DEFAULT_SESSION_CACHE_MINUTES
                    ),
                }
            ),
            "team_settings": team.model_copy(
                update={
                    "restrict_team_names": _default(team.restrict_team_names, True),
                    "enable_team_listing": _default(team.enable_team_listing, False),
                }
            ),
            "sql_settings": sql.model_copy(
                update={"at_rest_encrypt_key": sql.at_rest_encrypt_key or _random_salt()}
            ),
            "file_settings": files.model_copy(
                update={"public_link_salt": files.public_link_salt or _random_salt()}
            ),
            "email_settings": email.model_copy(
                update={
                    "invite_salt": email.invite_salt or _random_salt(),
                    "password_reset_salt": email.password_reset_salt or _random_salt(),
                }
            ),
            "support_settings": support.model_copy(
                update={
                    "terms_of_service_link": _default(support.terms_of_service_link, DEFAULT_TERMS_OF_SERVICE_LINK),
                    "privacy_policy_link": _default(support.privacy_policy_link, DEFAULT_PRIVACY_POLICY_LINK),
                    "about_link": _default(support.about_link, DEFAULT_ABOUT_LINK),
                    "help_link": _default(support.help_link, DEFAULT_HELP_LINK),
                    "report_a_problem_link": _default(support.report_a_problem_link, DEFAULT_REPORT_A_PROBLEM_LINK),
                    "support_email": _default(support.support_email, DEFAULT_SUPPORT_EMAIL),
                }
            ),
            "ldap_settings": ldap.model_copy(
                update={
                    "enable": _default(ldap.enable, False),
                    "ldap_server": _default(ldap.ldap_server, ""),
                    "ldap_port": _default(ldap.ldap_port, DEFAULT_LDAP_PORT),
                    "base_dn": _default(ldap.base_dn, ""),
                    "bind_username": _default(ldap.bind_username, ""),
                    "bind_password": _default(ldap.bind_password, ""),
                    "first_name_attribute": _default(ldap.first_name_attribute, ""),
                    "last_name_attribute": _default(ldap.last_name_attribute, ""),
                    "email_attribute": _default(ldap.email_attribute, ""),
                    "username_attribute": _default(ldap.username_attribute, ""),
                    "id_attribute": _default(ldap.id_attribute, ""),
                }
            ),
        }
    )


def config_validate(configuration: Configuration, file_name: str) -> None:
    """Check cross-field and range constraints of a defaulted configuration.

    Args:
        configuration: Defaulted configuration.
        file_name: Source path used in error messages.

    Returns:
        None: Returns only when the configuration is valid.

    Raises:
        ConfigValidationError: Raised for the first violated constraint.
    """

    service = configuration.service_settings
    team = configuration.team_settings
    sql = configuration.sql_settings
    files = configuration.file_settings
    email = configuration.email_settings
    rate_limit = configuration.rate_limit_settings
    ldap = configuration.ldap_settings
    log = configuration.log_settings

    def _require(condition: bool, field_name: str, message: str) -> None:
        if not condition:
            raise ConfigValidationError(
                f"Error validating config file={file_name}, field={field_name}, err={message}",
                file_name=file_name,
                field_name=field_name,
            )

    _require(
        service.maximum_login_attempts > 0,
        "ServiceSettings.MaximumLoginAttempts",
        "must be a positive number",
    )
    _require(bool(service.listen_address.strip()), "ServiceSettings.ListenAddress", "must be set")
    _require(
        _is_listen_address(service.listen_address),
        "ServiceSettings.ListenAddress",
        "must be [host]:port with a port between 1 and 65535",
    )
    _require(team.max_users_per_team > 0, "TeamSettings.MaxUsersPerTeam", "must be a positive number")
    _require(
        len(sql.at_rest_encrypt_key) == _SALT_LENGTH,
        "SqlSettings.AtRestEncryptKey",
        f"must be {_SALT_LENGTH} characters",
    )
    _require(
        sql.driver_name in DATABASE_DRIVERS,
        "SqlSettings.DriverName",
        f"must be one of {sorted(DATABASE_DRIVERS)}",
    )
    _require(sql.max_idle_conns > 0, "SqlSettings.MaxIdleConns", "must be a positive number")
    _require(sql.max_open_conns > 0, "SqlSettings.MaxOpenConns", "must be a positive number")
    _require(bool(sql.data_source.strip()), "SqlSettings.DataSource", "must be set")
    _require(_is_database_url(sql.data_source), "SqlSettings.DataSource", "must be a valid database URL")
    _require(
        files.driver_name in FILE_DRIVERS,
        "FileSettings.DriverName",
        f"must be one of {sorted(FILE_DRIVERS)}",
    )
    _require(
        files.driver_name != FILE_DRIVER_LOCAL or bool(files.directory.strip()),
        "FileSettings.Directory",
        "must be set for the local driver",
    )
    _require(files.preview_height >= 0, "FileSettings.PreviewHeight", "must be 0 or a positive number")
    _require(files.preview_width > 0, "FileSettings.PreviewWidth", "must be a positive number")
    _require(files.profile_height > 0, "FileSettings.ProfileHeight", "must be a positive number")
    _require(files.profile_width > 0, "FileSettings.ProfileWidth", "must be a positive number")
    _require(files.thumbnail_height > 0, "FileSettings.ThumbnailHeight", "must be a positive number")
    _require(files.thumbnail_width > 0, "FileSettings.ThumbnailWidth", "must be a positive number")
    _require(
        len(files.public_link_salt) == _SALT_LENGTH,
        "FileSettings.PublicLinkSalt",
        f"must be {_SALT_LENGTH} characters",
    )
    _require(
        email.connection_security in CONN_SECURITY_MODES,
        "EmailSettings.ConnectionSecurity",
        "must be '', 'TLS' or 'STARTTLS'",
    )
    _require(
        len(email.invite_salt) == _SALT_LENGTH,
        "EmailSettings.InviteSalt",
        f"must be {_SALT_LENGTH} characters",
    )
    _require(
        len(email.password_reset_salt) == _SALT_LENGTH,
        "EmailSettings.PasswordResetSalt",
        f"must be {_SALT_LENGTH} characters",
    )
    _require(rate_limit.memory_store_size > 0, "RateLimitSettings.MemoryStoreSize", "must be a positive number")
    _require(rate_limit.per_sec > 0, "RateLimitSettings.PerSec", "must be a positive number")
    _require(
        not ldap.enable or bool(ldap.ldap_server),
        "LdapSettings.LdapServer",
        "must be set when LDAP is enabled",
    )
    _require(
        not (log.enable_file and log.file_location)
        or os.path.isdir(os.path.dirname(os.path.abspath(log.file_location))),
        "LogSettings.FileLocation",
        "directory of the log file must exist",
    )


def config_normalize(configuration: Configuration) -> Configuration:
    """Normalize derived fields of a validated configuration.

    The local storage directory always ends with exactly one `/`.

    Args:
        configuration: Validated configuration.

    Returns:
        Configuration: Normalized configuration instance.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    files = configuration.file_settings
    if files.driver_name != FILE_DRIVER_LOCAL or not files.directory:
        return configuration

    normalized_directory = files.directory.rstrip("/") + "/"
    if normalized_directory == files.directory:
        return configuration
    return configuration.model_copy(
        update={"file_settings": files.model_copy(update={"directory": normalized_directory})}
    )


def config_save_file(file_name: str, configuration: Configuration) -> None:
    """Persist a configuration as indented JSON.

    Process-derived fields such as `OAuthSettings` are not written.

    Args:
        file_name: Target file path.
        configuration: Configuration to persist.

    Returns:
        None: Writes the file as side effect.

    Raises:
        ConfigSaveError: Raised when serialization or the write fails.
    """

    try:
        payload = configuration.model_dump_json(by_alias=True, indent=4)
    except ValueError as error:
        raise ConfigSaveError(
            f"An error occurred while saving the file to {file_name}: {error}",
            file_name=file_name,
        ) from error

    try:
        with open(file_name, "w", encoding="utf-8") as config_file:
            config_file.write(payload)
        os.chmod(file_name, _SAVE_FILE_MODE)
    except OSError as error:
        raise ConfigSaveError(
            f"An error occurred while saving the file to {file_name}: {error}",
            file_name=file_name,
        ) from error

    logger.info("Saved config file=%s", file_name)


def _default(value, fallback):
    return fallback if value is None else value


def _random_salt() -> str:
    return secrets.token_hex(_SALT_LENGTH // 2)


def _is_listen_address(listen_address: str) -> bool:
    _, separator, port_text = listen_address.strip().rpartition(":")
    return bool(separator) and port_text.isdigit() and 1 <= int(port_text) <= 65535


def _is_database_url(data_source: str) -> bool:
    try:
        make_url(data_source)
    except (ArgumentError, ValueError):
        return False
    return True
