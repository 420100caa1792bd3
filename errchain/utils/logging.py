"""\
Logging
=======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module provides logging utilities that understand error chains.
Logging an error chain is where its diagnostic side (the developer
message and the captured stack) is meant to surface, as opposed to the
user-facing message which belongs to end-user displays.

It includes formatters for plain, coloured and JSON output with
automatic extra field handling, a filter that enriches records carrying
an error chain with its code and messages, and a `configure` helper
that installs console and rotating file handlers from a `LoggerConfig`.

The library itself only emits DEBUG records through `get_logger` and
never installs handlers on import.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import typing as t

from errchain.utils.filesystem import mkdir

if t.TYPE_CHECKING:
    from errchain.core.config import LoggerConfig

__all__: list[str] = [
    "ChainFormatter",
    "ColouredFormatter",
    "ErrorChainFilter",
    "JSONFormatter",
    "configure",
    "get_logger",
]


def _chain_error(record: logging.LogRecord) -> t.Any:
    """Return the error chain attached to a record, if any."""
    from errchain.core.chain import Link

    if record.exc_info and isinstance(record.exc_info[1], Link):
        return record.exc_info[1]
    return None


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    This formatter outputs log records in JSON format. Records logged
    with an error chain as `exc_info` also get its code, user messages,
    developer notes and the structured captured stack, which keeps them
    machine-readable for log management systems.

    :param extras: Whether to include extra fields in output, defaults
        to `True`.
    """

    def __init__(self, extras: bool = True):
        """Initialise the JSON formatter instance."""
        super().__init__()
        self.extras = extras

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        :param record: The log record to format.
        :return: JSON-formatted log message.
        """
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        error = _chain_error(record)
        if error is not None:
            from errchain.core import unwrap

            payload["error"] = {
                "code": unwrap.code(error),
                "messages": unwrap.messages(error),
                "dev_messages": unwrap.dev_messages(error),
                "stack_trace": [
                    frame.as_dict() for frame in unwrap.stack_trace(error)
                ],
            }
        elif record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if self.extras:
            for key, value in record.__dict__.items():
                if key not in payload and key not in _RESERVED:
                    if not key.startswith("_"):
                        payload[key] = value
        return json.dumps(payload, default=str)


class ChainFormatter(logging.Formatter):
    """Custom formatter that automatically includes extra fields.

    This formatter detects extra fields (those not part of the standard
    `LogRecord` attributes) and makes them available as `%(extra)s` in
    the format string. It also provides `%(qualName)s`, the logger name
    followed by the function name. Records carrying an error chain are
    rendered with the chain's display text followed by its captured
    stack instead of a Python traceback.

    :param fmt: The format string for log messages, defaults to `None`.
    :param datefmt: The format string for timestamps, defaults to
        `None`.
    :param extra_format: Format string for individual extra fields.
    :param extra_separator: Separator between multiple extra fields,
        defaults to a single space.
    """

    LOG_RECORD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
        "taskName",
        "qualName",
        "extra",
    }

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        extra_format: str = "{key}: {value}",
        extra_separator: str = " ",
    ) -> None:
        """Initialise the custom formatter."""
        super().__init__(fmt, datefmt)
        self.extra = extra_format
        self.extra_separator = extra_separator

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with automatic extra field handling.

        :param record: The log record to format.
        :return: Formatted log message with extra fields.
        """
        clone = logging.makeLogRecord(record.__dict__)
        entries = []
        for key, value in sorted(record.__dict__.items()):
            if key not in self.LOG_RECORD_ATTRS and not key.startswith("_"):
                entries.append(self.extra.format(key=key, value=value))
        clone.extra = self.extra_separator.join(entries)
        if not hasattr(clone, "qualName"):
            clone.qualName = f"{record.name}.{record.funcName}"
        return super().format(clone)

    def formatException(self, ei: t.Any) -> str:
        """Render error chains by their captured stack."""
        from errchain.core.chain import Link
        from errchain.core.unwrap import stack

        if isinstance(ei[1], Link):
            return f"{ei[1]}\n{stack(ei[1])}".rstrip("\n")
        return super().formatException(ei)


class ColouredFormatter(ChainFormatter):
    """Formatter colouring the level and qualified name on a TTY.

    Colours are only applied when `is_tty` is set, so log files remain
    free of ANSI escape sequences.

    :var COLORS: Dictionary mapping log levels to ANSI colour codes.
    """

    COLORS = {
        "DEBUG": "\x1b[38;5;14m",
        "INFO": "\x1b[38;5;41m",
        "WARNING": "\x1b[38;5;215m",
        "ERROR": "\x1b[38;5;204m",
        "CRITICAL": "\x1b[38;5;197m",
        "QUALNAME": "\x1b[38;5;140m",
        "RESET": "\x1b[0m",
    }

    is_tty: bool = False

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, with colours only for TTY output."""
        clone = logging.makeLogRecord(record.__dict__)
        qualname = f"{record.name}.{record.funcName}"
        if self.is_tty:
            colour = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            clone.levelname = f"{colour}{record.levelname:>8s}{reset}"
            clone.qualName = f"{self.COLORS['QUALNAME']}{qualname}{reset}"
        else:
            clone.levelname = f"{record.levelname:>8s}"
            clone.qualName = qualname
        return super().format(clone)


_RESERVED: t.Final[frozenset[str]] = frozenset(
    ChainFormatter.LOG_RECORD_ATTRS
)


class ErrorChainFilter(logging.Filter):
    """Filter adding error chain details to log records.

    Records logged with an error chain as `exc_info` get the
    `error_code`, `error_message` and `error_dev_message` attributes,
    which formatters render as extra fields.

    Example::

        .. code-block:: python

            logger = logging.getLogger("payments")
            logger.addFilter(ErrorChainFilter())
            try:
                charge(card)
            except errchain.Link:
                logger.exception("Charge failed")
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add error chain details to the log record.

        :param record: Log record to modify.
        :return: `True` to keep the record.
        """
        error = _chain_error(record)
        if error is not None:
            from errchain.core import unwrap

            record.error_code = unwrap.code(error)
            record.error_message = unwrap.message(error)
            record.error_dev_message = unwrap.dev_message(error)
        return True


def configure(config: LoggerConfig) -> None:
    """Configure logging based on provided configuration settings.

    This function sets up console and rotating file handlers on the root
    logger. Handlers use the JSON formatter if `as_json` is set and the
    coloured formatter otherwise, and every handler enriches records
    carrying an error chain through `ErrorChainFilter`.

    :param config: Logging configuration settings.
    """
    handlers: list[logging.Handler] = []
    levels: list[int] = []
    logger = logging.getLogger()
    logger.handlers.clear()
    if config.tty.enable:
        levels.append(getattr(logging, config.tty.level))
    if config.file.enable:
        levels.append(getattr(logging, config.file.level))
    logger.setLevel(min(levels) if levels else getattr(logging, config.level))
    if config.tty.enable:
        tty = logging.StreamHandler(sys.stdout)
        tty.setLevel(getattr(logging, config.tty.level))
        if config.as_json:
            formatter = JSONFormatter()
        else:
            formatter = ColouredFormatter(
                fmt=config.tty.fmt,
                datefmt=config.tty.datefmt,
                extra_format="[{key}: {value}]",
            )
            formatter.is_tty = bool(config.tty.colour)
        tty.setFormatter(formatter)
        handlers.append(tty)
    if config.file.enable:
        path = os.path.join(mkdir(config.file.path), config.file.output)
        handler = logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=config.file.max_bytes,
            backupCount=config.file.backups,
            encoding=config.file.encoding,
        )
        handler.setLevel(getattr(logging, config.file.level))
        if config.as_json:
            formatter = JSONFormatter()
        else:
            formatter = ColouredFormatter(
                fmt=config.file.fmt,
                datefmt=config.file.datefmt,
                extra_format="[{key}: {value}]",
            )
        handler.setFormatter(formatter)
        handlers.append(handler)
    for handler in handlers:
        handler.addFilter(ErrorChainFilter())
        logger.addHandler(handler)


def get_logger(logger_name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    :param logger_name: Logger name.
    :return: Logger instance.
    """
    return logging.getLogger(logger_name)
