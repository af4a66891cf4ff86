"""Typed process settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when process settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Process settings that locate and drive the configuration pipeline.

    Environment variable names map directly to field names in uppercase.
    Example: `config_file_name` reads from `CONFIG_FILE_NAME`.

    Attributes:
        environment_name: Runtime environment label.
        config_file_name: Logical config file name handed to the path resolver.
        connectivity_timeout_seconds: Upper bound for each startup smoke-test call.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    config_file_name: str = Field(default="config.json", min_length=1)
    connectivity_timeout_seconds: float = Field(default=5.0, gt=0, le=60)

    @field_validator("config_file_name")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value


def config_load_settings() -> AppSettings:
    """Load and validate process settings from environment and dotenv.

    Returns:
        AppSettings: Validated process settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup settings validation failed. Update .env or environment variables. Details: {error}"
        ) from error
