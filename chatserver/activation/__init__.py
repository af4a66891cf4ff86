"""Subsystem activation package for logging sinks and startup smoke-tests."""

from .connectivity import ConnectivityChecker, activation_s3_endpoint
from .errors import ActivationError
from .logging_setup import (
    DEFAULT_LOG_FILE_NAME,
    DEFAULT_LOG_FORMAT,
    LOG_ROTATE_LINES,
    LineRotatingFileHandler,
    TemplateFormatter,
    activation_configure_command_line_logging,
    activation_configure_logging,
    activation_log_file_location,
    activation_parse_level,
    activation_reset_logging,
)

__all__ = [
    "ActivationError",
    "ConnectivityChecker",
    "DEFAULT_LOG_FILE_NAME",
    "DEFAULT_LOG_FORMAT",
    "LOG_ROTATE_LINES",
    "LineRotatingFileHandler",
    "TemplateFormatter",
    "activation_configure_command_line_logging",
    "activation_configure_logging",
    "activation_log_file_location",
    "activation_parse_level",
    "activation_reset_logging",
    "activation_s3_endpoint",
]
