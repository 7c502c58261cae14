"""Logging for lambdahelpers.

Loggers returned by :func:`get_logger` carry structured fields (bucket, key,
path, ...) next to the message instead of formatting them into the text::

    from lambdahelpers.utils.logger import get_logger

    log = get_logger(__name__)
    log.with_fields(bucket="site", key="index.html").info("Uploaded")
    # [INFO] lambdahelpers.services.storage.bucket: Uploaded bucket=site key=index.html

Console output is coloured with *colorama*. Jobs whose output is shipped to
CloudWatch can switch to one JSON object per line with
``setup_logging(json_format=True)``.
"""
import json
import logging
import sys
from typing import Any, Dict

from colorama import Fore, Style

__all__ = ["FieldLogger", "get_logger", "setup_logging"]

_LEVEL_COLOURS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "fields", None) or {}


class ColouredFormatter(logging.Formatter):
    """Coloured ``[LEVEL]`` tag, the message, then ``key=value`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        colour = _LEVEL_COLOURS.get(record.levelno, "")
        msg = super().format(record)
        fields = _record_fields(record)
        if fields:
            rendered = " ".join(f"{name}={value}" for name, value in fields.items())
            msg = f"{msg} {Fore.WHITE}{rendered}{Style.RESET_ALL}"
        return f"{colour}[{record.levelname}]{Style.RESET_ALL} {msg}"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_record_fields(record))
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class FieldLogger(logging.LoggerAdapter):
    """Logger adapter that attaches a dict of fields to every record."""

    def __init__(self, logger: logging.Logger, fields: Dict[str, Any] = None):
        super().__init__(logger, dict(fields or {}))

    def with_fields(self, **fields) -> "FieldLogger":
        """Return a logger carrying the current fields plus *fields*."""
        return FieldLogger(self.logger, {**self.extra, **fields})

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra["fields"] = {**self.extra, **extra.get("fields", {})}
        kwargs["extra"] = extra
        return msg, kwargs


_ROOT_LOGGER_NAME = "lambdahelpers"
_configured = False


def setup_logging(verbose: bool = False, quiet: bool = False, json_format: bool = False) -> None:
    """Configure the root *lambdahelpers* logger.

    Call once from the job's entry point (e.g. the Lambda handler module).
    Repeated calls update the level and formatter of the existing handler.

    Args:
        verbose: If *True*, set level to ``DEBUG``.
        quiet: If *True*, set level to ``WARNING`` (overrides *verbose*).
        json_format: Emit JSON lines instead of coloured text.
    """
    global _configured  # noqa: PLW0603

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    formatter = JSONFormatter() if json_format else ColouredFormatter("%(name)s: %(message)s")

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stderr))
    for handler in root.handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    _configured = True


def get_logger(name: str, **fields) -> FieldLogger:
    """Return a :class:`FieldLogger` under the *lambdahelpers* namespace.

    If :func:`setup_logging` has not been called yet, a default
    ``INFO``-level configuration is applied automatically.

    Args:
        name: Typically ``__name__`` of the calling module.
        **fields: Fields attached to every record of this logger.
    """
    if not _configured:
        setup_logging()

    if not name.startswith(_ROOT_LOGGER_NAME):
        name = f"{_ROOT_LOGGER_NAME}.{name}"

    return FieldLogger(logging.getLogger(name), fields)
