"""
Logging setup for the FLDRS vessel report.

``configure_logging(config)`` is called once by each CLI command. Library
modules only ever use ``logging.getLogger(__name__)``.

Log lines go to stderr (and optionally a file) so the totals table printed
on stdout can be piped or redirected on its own. With ``json_format = true``
each line is a JSON object::

    {"ts": "2021-02-09T15:00:00Z", "level": "WARNING", "logger": "py.warnings", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fldrs_report.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``
    and, for failed runs, ``exc``."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "ts": ts.strftime(LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _make_formatter(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(config: "LoggingConfig") -> None:
    """Configure the root logger from the ``[logging]`` config section.

    Installs a stderr handler, plus a file handler when ``config.log_file``
    is non-empty, both at ``config.level``. ``warnings.warn`` calls (such as
    ``EmptyResultWarning``) are routed through the same handlers.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = _make_formatter(config)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)

    logging.getLogger("openpyxl").setLevel(logging.WARNING)
