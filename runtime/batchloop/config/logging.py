"""Logging helpers.

Batch processes log JSON lines so supervisors can parse them. Startup
announcements go out at NOTICE, between INFO and WARNING.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from batchloop.errors import ConfigurationError

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

_EXTRA_KEYS = ("batch", "mode", "handler", "event", "iteration", "sleep_seconds", "reason")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for k in _EXTRA_KEYS:
            v = getattr(record, k, None)
            if v is not None:
                base[k] = v

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=True, sort_keys=True, default=str)


def apply_logging_config(path: Path | None, *, level: int = logging.INFO) -> None:
    """Apply a dictConfig YAML file when present, else JSON lines on stderr."""
    if path is not None and path.exists():
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse logging config YAML: {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Invalid logging config YAML root object: {path}")
        try:
            logging.config.dictConfig(raw)
        except (ValueError, TypeError, AttributeError, ImportError) as e:
            raise ConfigurationError(f"Invalid logging config: {path}: {e}") from e
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
