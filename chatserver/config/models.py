"""Typed configuration schema decoded from the server config file.

JSON keys are PascalCase (`TeamSettings.SiteName`). Fields typed as
`X | None` distinguish "unset" from an explicit value and are filled by
`config_apply_defaults`; all other optional fields carry schema defaults.
Every model is frozen so a published configuration cannot be mutated.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_pascal

DATABASE_DRIVER_POSTGRES: Final[str] = "postgres"
DATABASE_DRIVER_MYSQL: Final[str] = "mysql"
DATABASE_DRIVERS: Final[frozenset[str]] = frozenset({DATABASE_DRIVER_POSTGRES, DATABASE_DRIVER_MYSQL})

FILE_DRIVER_LOCAL: Final[str] = "local"
FILE_DRIVER_S3: Final[str] = "amazons3"
FILE_DRIVERS: Final[frozenset[str]] = frozenset({FILE_DRIVER_LOCAL, FILE_DRIVER_S3})

CONN_SECURITY_NONE: Final[str] = ""
CONN_SECURITY_TLS: Final[str] = "TLS"
CONN_SECURITY_STARTTLS: Final[str] = "STARTTLS"
CONN_SECURITY_MODES: Final[frozenset[str]] = frozenset(
    {CONN_SECURITY_NONE, CONN_SECURITY_TLS, CONN_SECURITY_STARTTLS}
)


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        strict=True,
        extra="ignore",
    )


class ServiceSettings(_SettingsModel):
    """Web service behaviour and developer integrations."""

    listen_address: str
    maximum_login_attempts: int = 10
    segment_developer_key: str = ""
    google_developer_key: str = ""
    enable_oauth_service_provider: bool = Field(default=False, alias="EnableOAuthServiceProvider")
    enable_incoming_webhooks: bool = True
    enable_outgoing_webhooks: bool = True
    enable_post_username_override: bool = False
    enable_post_icon_override: bool = False
    enable_testing: bool = False
    enable_developer: bool | None = None
    enable_security_fix_alert: bool | None = None
    session_length_web_in_days: int | None = None
    session_length_mobile_in_days: int | None = None
    session_length_sso_in_days: int | None = Field(default=None, alias="SessionLengthSSOInDays")
    session_cache_in_minutes: int | None = None


class TeamSettings(_SettingsModel):
    """Team creation and membership policy."""

    site_name: str
    max_users_per_team: int = 50
    enable_team_creation: bool = True
    enable_user_creation: bool = True
    restrict_creation_to_domains: str = ""
    restrict_team_names: bool | None = None
    enable_team_listing: bool | None = None


class SqlSettings(_SettingsModel):
    """Primary database connectivity.

    `data_source` is an SQLAlchemy URL, for example
    `postgresql+psycopg://user:secret@db:5432/chat`.
    """

    driver_name: str
    data_source: str
    data_source_replicas: tuple[str, ...] = ()
    max_idle_conns: int = 10
    max_open_conns: int = 10
    trace: bool = False
    at_rest_encrypt_key: str = ""


class LogSettings(_SettingsModel):
    """Console and file log sinks."""

    enable_console: bool = True
    console_level: str = "DEBUG"
    enable_file: bool = False
    file_level: str = "INFO"
    file_format: str = ""
    file_location: str = ""


class FileSettings(_SettingsModel):
    """Attachment storage backend and image sizing."""

    driver_name: str
    directory: str = ""
    enable_public_link: bool = False
    public_link_salt: str = ""
    thumbnail_width: int = 120
    thumbnail_height: int = 100
    preview_width: int = 1024
    preview_height: int = 0
    profile_width: int = 128
    profile_height: int = 128
    initial_font: str = "luximbi.ttf"
    amazon_s3_access_key_id: str = ""
    amazon_s3_secret_access_key: str = ""
    amazon_s3_bucket: str = ""
    amazon_s3_region: str = ""
    amazon_s3_endpoint: str = ""


class EmailSettings(_SettingsModel):
    """Sign-up, notification and SMTP delivery."""

    enable_sign_up_with_email: bool = True
    send_email_notifications: bool = False
    require_email_verification: bool = False
    feedback_name: str = ""
    feedback_email: str = ""
    smtp_username: str = Field(default="", alias="SMTPUsername")
    smtp_password: str = Field(default="", alias="SMTPPassword")
    smtp_server: str = Field(default="", alias="SMTPServer")
    smtp_port: str = Field(default="", alias="SMTPPort")
    connection_security: str = CONN_SECURITY_NONE
    invite_salt: str = ""
    password_reset_salt: str = ""
    apple_push_server: str = ""


class RateLimitSettings(_SettingsModel):
    enable_rate_limiter: bool = False
    per_sec: int = 10
    memory_store_size: int = 10000
    vary_by_remote_addr: bool = True
    vary_by_header: str = ""


class PrivacySettings(_SettingsModel):
    show_email_address: bool = True
    show_full_name: bool = True


class SupportSettings(_SettingsModel):
    """Help and legal links rendered by clients."""

    terms_of_service_link: str | None = None
    privacy_policy_link: str | None = None
    about_link: str | None = None
    help_link: str | None = None
    report_a_problem_link: str | None = None
    support_email: str | None = None


class SSOSettings(_SettingsModel):
    """OAuth2 single sign-on endpoint settings for one provider."""

    enable: bool = False
    secret: str = ""
    id: str = ""
    scope: str = ""
    auth_endpoint: str = ""
    token_endpoint: str = ""
    user_api_endpoint: str = ""


class LdapSettings(_SettingsModel):
    enable: bool | None = None
    ldap_server: str | None = None
    ldap_port: int | None = None
    base_dn: str | None = Field(default=None, alias="BaseDN")
    bind_username: str | None = None
    bind_password: str | None = None
    first_name_attribute: str | None = None
    last_name_attribute: str | None = None
    email_attribute: str | None = None
    username_attribute: str | None = None
    id_attribute: str | None = None


class Configuration(_SettingsModel):
    """Complete server configuration.

    Attributes:
        oauth_config_dir: Directory scanned for identity provider definition files.
        oauth_settings: Enabled identity providers merged in by the extension
            loader. Derived at load time, never read from or written back to disk.
    """

    service_settings: ServiceSettings
    team_settings: TeamSettings
    sql_settings: SqlSettings
    log_settings: LogSettings = Field(default_factory=LogSettings)
    file_settings: FileSettings
    email_settings: EmailSettings = Field(default_factory=EmailSettings)
    rate_limit_settings: RateLimitSettings = Field(default_factory=RateLimitSettings)
    privacy_settings: PrivacySettings = Field(default_factory=PrivacySettings)
    support_settings: SupportSettings = Field(default_factory=SupportSettings)
    gitlab_settings: SSOSettings = Field(default_factory=SSOSettings, alias="GitLabSettings")
    google_settings: SSOSettings = Field(default_factory=SSOSettings)
    ldap_settings: LdapSettings = Field(default_factory=LdapSettings)
    oauth_config_dir: str = Field(default="", alias="OAuthConfigDir")
    oauth_settings: dict[str, SSOSettings] | None = Field(default=None, alias="OAuthSettings", exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_process_derived_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if key not in ("OAuthSettings", "oauth_settings")}
        return data
