# reunion/core/logging.py
# One place to configure the "reunion" logger tree (API process and scripts).

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
import json
import logging

LOGGER_NAME = "reunion"


def get_logger(name: str) -> logging.Logger:
    """Child of the 'reunion' logger, e.g. get_logger('drive') -> 'reunion.drive'."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "name": record.name,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_logs: bool = False,
                  verbose: int = 0, quiet: bool = False,
                  log_level_arg: Optional[str] = None) -> logging.Logger:
    """
    Console-only logging for the API and the scripts.
      - --log-level=X wins over everything
      - -q:  WARNING and up
      - -v:  INFO, -vv: DEBUG
      - otherwise: `level` (from [logging] in reunion.toml)
    Safe to call twice; old handlers are removed first.
    """
    if log_level_arg:
        console_level = getattr(logging, log_level_arg.upper())
    elif quiet:
        console_level = logging.WARNING
    elif verbose >= 2:
        console_level = logging.DEBUG
    elif verbose >= 1:
        console_level = logging.INFO
    else:
        console_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(console_level)
    logger.propagate = False
    for h in list(logger.handlers): logger.removeHandler(h)

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    if json_logs:
        ch.setFormatter(JsonFormatter())
    else:
        ch.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
    logger.addHandler(ch)
    return logger
