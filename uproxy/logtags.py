"""Logging helpers that tag every record with the layer it came from."""

from __future__ import annotations

import json
import logging
from typing import Any

_logger = logging.getLogger("uproxy")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if not text or any(ch.isspace() or ch in '"=' for ch in text):
        return json.dumps(text)
    return text


def log(level: int, layer: str, msg: str, **kwargs: Any) -> None:
    """Log ``msg`` at ``level`` with ``layer=<layer>`` and the given key/value fields."""
    fields = {"layer": layer, **kwargs}
    suffix = " ".join(f"{key}={_format_value(value)}" for key, value in fields.items())
    _logger.log(level, "%s %s", msg, suffix, extra={"layer": layer, "fields": dict(kwargs)})


def log_info(layer: str, msg: str, **kwargs: Any) -> None:
    """Log an info message tagged with ``layer``."""
    log(logging.INFO, layer, msg, **kwargs)


def log_error(layer: str, msg: str, **kwargs: Any) -> None:
    """Log an error message tagged with ``layer``."""
    log(logging.ERROR, layer, msg, **kwargs)


def log_warn(layer: str, msg: str, **kwargs: Any) -> None:
    """Log a warning message tagged with ``layer``."""
    log(logging.WARNING, layer, msg, **kwargs)


def log_debug(layer: str, msg: str, **kwargs: Any) -> None:
    """Log a debug message tagged with ``layer``."""
    log(logging.DEBUG, layer, msg, **kwargs)