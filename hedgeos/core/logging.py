from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any

LOGGER_NAME = "hedgeos"
HANDLER_NAME = "hedgeos-session"

_FORMATS = {
    "json": "%(message)s",
    "text": "%(asctime)s %(levelname)s %(name)s %(message)s",
}


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(
    *,
    level: str = "info",
    format_name: str = "json",
    stream: IO[str] | None = None,
    log_dir: Path | None = None,
    filename: str = "hedgeos.log",
) -> logging.Handler:
    """Attach the session handler to the ``hedgeos`` logger.

    Records go to ``stream`` when given, else to ``<log_dir>/<filename>``,
    else nowhere: the TUI owns the terminal. Calling again replaces the
    previous session handler.
    """
    logger = get_logger()
    logger.setLevel(getattr(logging, level.strip().upper(), logging.INFO))
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)
            existing.close()

    handler: logging.Handler
    if stream is not None:
        handler = logging.StreamHandler(stream)
    elif log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / filename, encoding="utf-8")
    else:
        handler = logging.NullHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMATS.get(format_name, _FORMATS["text"])))
    logger.addHandler(handler)
    return handler


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return
    payload = {"event": event, **fields}
    logger.info(json.dumps(payload, sort_keys=True, default=str))
