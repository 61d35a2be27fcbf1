"""Logging for badgesync.

Inside a GitHub Actions job the console handler emits workflow commands so
warnings and errors show up as run annotations. Elsewhere it prints a plain
``[badgesync] LEVEL message`` line.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "badgesync"
_PLAIN_FORMAT = "[badgesync] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_WORKFLOW_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class WorkflowCommandFormatter(logging.Formatter):
    """Formats records as GitHub Actions workflow commands (``::warning::...``).

    INFO records have no command and are printed unchanged.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands are line based; newlines must be escaped.
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``badgesync.<name>``, e.g. ``badgesync.publisher``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def _console_handler(level: int, workflow_commands: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = (
        WorkflowCommandFormatter("%(message)s")
        if workflow_commands
        else logging.Formatter(_PLAIN_FORMAT)
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    workflow_commands: bool = False,
) -> logging.Logger:
    """Install the console handler (and ``log_file`` sink) on the badgesync logger.

    Calling it again replaces the previous handlers, so repeated CLI runs in
    one process do not duplicate output.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(_console_handler(level, workflow_commands))

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["WorkflowCommandFormatter", "configure_logging", "get_logger"]
