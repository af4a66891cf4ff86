"""Logging activation for console and line-rotated file sinks."""

from __future__ import annotations

import logging
import logging.handlers
import os
import re
import sys
import time
from typing import Final

from chatserver.config import LogSettings, config_resolve_dir

from .errors import ActivationError

LOG_ROTATE_LINES: Final[int] = 10000
LOG_BACKUP_COUNT: Final[int] = 5
DEFAULT_LOG_FORMAT: Final[str] = "[%D %T] [%L] %M"
DEFAULT_LOG_FILE_NAME: Final[str] = "chatserver.log"
DEFAULT_LOGGER_NAME: Final[str] = "chatserver"

CONSOLE_HANDLER_NAME: Final[str] = "stdout"
FILE_HANDLER_NAME: Final[str] = "file"

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}
_LEVEL_LABELS: Final[dict[int, str]] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}
_PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(r"%[DdTtLSsM]")


class TemplateFormatter(logging.Formatter):
    """Formatter for `%`-placeholder line templates.

    `%D` is the date (`2006/01/02`), `%d` the short date (`01/02/06`), `%T`
    the time (`15:04:05`), `%t` the short time (`15:04`), `%L` the level,
    `%S` the logger name, `%s` its last dotted component and `%M` the
    message. Any other text is copied verbatim.
    """

    def __init__(self, template: str = DEFAULT_LOG_FORMAT) -> None:
        super().__init__()
        self._template = template or DEFAULT_LOG_FORMAT

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = message + "\n" + self.formatException(record.exc_info)
        created = time.localtime(record.created)
        replacements = {
            "%D": time.strftime("%Y/%m/%d", created),
            "%d": time.strftime("%m/%d/%y", created),
            "%T": time.strftime("%H:%M:%S", created),
            "%t": time.strftime("%H:%M", created),
            "%L": _LEVEL_LABELS.get(record.levelno, record.levelname),
            "%S": record.name,
            "%s": record.name.rpartition(".")[2],
            "%M": message,
        }
        return _PLACEHOLDER_PATTERN.sub(lambda match: replacements[match.group(0)], self._template)


class LineRotatingFileHandler(logging.handlers.BaseRotatingHandler):
    """File handler that rotates after a fixed number of records.

    Backups are numbered like `RotatingFileHandler`: `name.1` is the newest.
    """

    def __init__(
        self,
        filename: str,
        max_lines: int = LOG_ROTATE_LINES,
        backup_count: int = LOG_BACKUP_COUNT,
        encoding: str = "utf-8",
    ) -> None:
        if max_lines <= 0:
            raise ValueError("max_lines must be > 0")
        if backup_count <= 0:
            raise ValueError("backup_count must be > 0")
        super().__init__(filename, mode="a", encoding=encoding, delay=False)
        self.max_lines = max_lines
        self.backup_count = backup_count
        self._line_count = _count_lines(self.baseFilename)

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        return self._line_count >= self.max_lines

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None  # type: ignore[assignment]
        for index in range(self.backup_count - 1, 0, -1):
            source_name = self.rotation_filename(f"{self.baseFilename}.{index}")
            target_name = self.rotation_filename(f"{self.baseFilename}.{index + 1}")
            if os.path.exists(source_name):
                if os.path.exists(target_name):
                    os.remove(target_name)
                os.rename(source_name, target_name)
        first_backup_name = self.rotation_filename(self.baseFilename + ".1")
        if os.path.exists(first_backup_name):
            os.remove(first_backup_name)
        self.rotate(self.baseFilename, first_backup_name)
        self.stream = self._open()
        self._line_count = 0

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self._line_count += 1


def activation_parse_level(level_name: str) -> int:
    """Map a configured level name to a `logging` level.

    Args:
        level_name: One of `DEBUG`, `INFO`, `WARN`, `ERROR`.

    Returns:
        int: Matching `logging` level; `DEBUG` for any unrecognized name.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return _LEVELS.get(level_name, logging.DEBUG)


def activation_log_file_location(file_location: str) -> str:
    """Return the log file path, defaulting into the resolved `logs` directory."""

    if file_location:
        return file_location
    return config_resolve_dir("logs") + DEFAULT_LOG_FILE_NAME


def activation_reset_logging(logger_name: str = DEFAULT_LOGGER_NAME) -> None:
    """Detach and close sinks installed by a previous activation.

    Handlers not installed by this module are left alone. Calling this more
    than once is harmless.
    """

    target_logger = logging.getLogger(logger_name)
    for handler in list(target_logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            target_logger.removeHandler(handler)
            handler.close()


def activation_configure_logging(log_settings: LogSettings, logger_name: str = DEFAULT_LOGGER_NAME) -> None:
    """Replace the active log sinks with the ones described by `log_settings`.

    The new sinks are opened before the previous ones are detached, so a
    failure leaves the active sinks untouched.

    Args:
        log_settings: Validated log settings.
        logger_name: Logger receiving the sinks.

    Returns:
        None: Configures the logger as side effect.

    Raises:
        ActivationError: Raised when the log file cannot be opened.
    """

    handlers: list[logging.Handler] = []

    if log_settings.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setLevel(activation_parse_level(log_settings.console_level))
        console_handler.setFormatter(TemplateFormatter(DEFAULT_LOG_FORMAT))
        handlers.append(console_handler)

    if log_settings.enable_file:
        file_location = activation_log_file_location(log_settings.file_location)
        try:
            file_handler = LineRotatingFileHandler(file_location)
        except OSError as error:
            for handler in handlers:
                handler.close()
            raise ActivationError(
                f"Error opening log file={file_location}, err={error}",
                target=file_location,
                field_name="LogSettings.FileLocation",
            ) from error
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setLevel(activation_parse_level(log_settings.file_level))
        file_handler.setFormatter(TemplateFormatter(log_settings.file_format or DEFAULT_LOG_FORMAT))
        handlers.append(file_handler)

    activation_reset_logging(logger_name)
    target_logger = logging.getLogger(logger_name)
    for handler in handlers:
        target_logger.addHandler(handler)
    target_logger.setLevel(min(handler.level for handler in handlers) if handlers else logging.NOTSET)


def activation_configure_command_line_logging(logger_name: str = DEFAULT_LOGGER_NAME) -> None:
    """Configure console-only logging at WARN for one-shot CLI commands."""

    activation_configure_logging(
        LogSettings(enable_console=True, console_level="WARN", enable_file=False),
        logger_name=logger_name,
    )


def _count_lines(file_name: str) -> int:
    if not os.path.exists(file_name):
        return 0
    with open(file_name, "rb") as log_file:
        return sum(1 for _ in log_file)
