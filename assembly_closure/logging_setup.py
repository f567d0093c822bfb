"""
CLI logging bootstrap.
Installs a stderr handler and, when configured, a JSONL file sink.
"""

import json
import logging
import sys
from datetime import UTC
from datetime import datetime
from pathlib import Path

# Loggers routed through init_logging. dnfile warns on corrupt metadata,
# partly through the root logger.
LOGGER_NAMES = ("assembly_closure", "dnfile", "")

# Handlers added by the last init_logging call
_installed: list[logging.Handler] = []

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        base = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": {"name": "assembly-closure.log", "ver": "1.0.0"},
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k in _RESERVED_ATTRS:
                continue
            base.setdefault(k, v)
        return base

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_logging(level: str = "WARNING", path: str | None = None) -> None:
    """Configure the package, dnfile and root loggers.

    All share one stderr handler and, when configured, one JSONL sink.

    Args:
        level: Level name for both handlers
        path: Optional JSONL log file
    """
    stream = logging.StreamHandler(stream=sys.stderr)
    stream.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handlers: list[logging.Handler] = [stream]
    if path:
        handlers.append(JsonlHandler(path))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
        logger.propagate = False

        # Remove handlers from a previous call to avoid duplicates
        for h in _installed:
            logger.removeHandler(h)
        for h in handlers:
            logger.addHandler(h)

    for h in _installed:
        h.close()
    _installed[:] = handlers
