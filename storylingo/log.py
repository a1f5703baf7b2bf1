"""Logging setup for StoryLingo.

Every module logs through a child of the ``storylingo`` logger, which owns the
only handler. Records go to stderr as one JSON object per line, or as plain
text with STORYLINGO_LOG_FORMAT=text. STORYLINGO_LOG_LEVEL picks the level.

Context goes in ``extra=``; only the keys in ``EXTRA_FIELDS`` are emitted.
"""

import json
import logging
import os
import sys
from typing import Any

ROOT_LOGGER = "storylingo"

EXTRA_FIELDS = (
    "component",
    "story_id",
    "action",
    "score",
    "count",
    "seq",
    "detail",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
            entry["error_type"] = type(record.exc_info[1]).__name__
        entry.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        return json.dumps(entry, ensure_ascii=False, default=str)


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    level = os.environ.get("STORYLINGO_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level, logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if os.environ.get("STORYLINGO_LOG_FORMAT", "json") == "text":
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))
    else:
        handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger under the ``storylingo`` hierarchy, e.g. ``get_logger("storylingo.drafts")``."""
    _configure_root()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
