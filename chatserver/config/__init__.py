"""Configuration package for process settings and the server config pipeline."""

from .errors import (
    ConfigDecodeError,
    ConfigFileError,
    ConfigLoadError,
    ConfigNotLoadedError,
    ConfigSaveError,
    ConfigValidationError,
)
from .loader import (
    LoadedConfiguration,
    config_apply_defaults,
    config_decode,
    config_load_file,
    config_normalize,
    config_save_file,
    config_validate,
)
from .models import (
    FILE_DRIVER_LOCAL,
    FILE_DRIVER_S3,
    Configuration,
    EmailSettings,
    FileSettings,
    LdapSettings,
    LogSettings,
    PrivacySettings,
    RateLimitSettings,
    ServiceSettings,
    SqlSettings,
    SSOSettings,
    SupportSettings,
    TeamSettings,
)
from .paths import config_resolve_dir, config_resolve_file
from .settings import AppSettings, SettingsLoadError, config_load_settings

__all__ = [
    "AppSettings",
    "ConfigDecodeError",
    "ConfigFileError",
    "ConfigLoadError",
    "ConfigNotLoadedError",
    "ConfigSaveError",
    "ConfigValidationError",
    "Configuration",
    "EmailSettings",
    "FILE_DRIVER_LOCAL",
    "FILE_DRIVER_S3",
    "FileSettings",
    "LdapSettings",
    "LoadedConfiguration",
    "LogSettings",
    "PrivacySettings",
    "RateLimitSettings",
    "SSOSettings",
    "ServiceSettings",
    "SettingsLoadError",
    "SqlSettings",
    "SupportSettings",
    "TeamSettings",
    "config_apply_defaults",
    "config_decode",
    "config_load_file",
    "config_load_settings",
    "config_normalize",
    "config_resolve_dir",
    "config_resolve_file",
    "config_save_file",
    "config_validate",
]
