"""Logging for seed runs.

Progress lines go to stdout. Every record, including structured seed
events, is also appended to ``logs/seed_YYYYMMDD.jsonl`` together with
the settings of the run that produced it (database, CSV, target).
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = [
    "LOG_DIR",
    "SEED_EVENTS",
    "setup_logging",
    "get_logger",
    "set_run_context",
    "get_run_context",
    "log_seed_event",
]

LOG_DIR = Path(__file__).parent.parent / "logs"

ROOT_LOGGER = "seed"

# Structured events a seed run may emit
SEED_EVENTS = frozenset({
    "import_start",
    "product_error",
    "image_failed",
    "import_complete",
    "scrape_failed",
    "scrape_complete",
})

_run_context: Dict[str, Any] = {}


def set_run_context(**fields: Any) -> None:
    """Replace the run settings stamped onto every JSONL record.

    ``None`` values are dropped, so a scrape-only run simply has no
    ``csv_path``.
    """
    _run_context.clear()
    _run_context.update({key: value for key, value in fields.items() if value is not None})


def get_run_context() -> Dict[str, Any]:
    return dict(_run_context)


class JSONLineFormatter(logging.Formatter):
    """One JSON object per record: message, event fields and run context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event_type = getattr(record, "event_type", None)
        if event_type:
            entry["event_type"] = event_type
            entry.update(getattr(record, "event_data", {}))
        if _run_context:
            entry["run"] = dict(_run_context)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Timestamped progress lines, coloured by level on a terminal."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool) -> None:
        super().__init__("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{line}{self.RESET}" if color else line


def setup_logging(level: int = logging.INFO, log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure the ``seed`` logger for one run.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Console level; the JSONL file always records DEBUG and up
        log_dir: Directory for the daily JSONL file (default: project logs/)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(min(level, logging.DEBUG))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter(use_color=sys.stdout.isatty()))
    logger.addHandler(console)

    directory = log_dir or LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"seed_{datetime.now():%Y%m%d}.jsonl"
    jsonl = logging.FileHandler(log_file, encoding="utf-8", delay=True)
    jsonl.setLevel(logging.DEBUG)
    jsonl.setFormatter(JSONLineFormatter())
    logger.addHandler(jsonl)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a seed module, e.g. ``get_logger("scraper")`` -> ``seed.scraper``."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_seed_event(event_type: str, data: Dict[str, Any], level: int = logging.INFO) -> None:
    """Emit a structured seed event.

    Args:
        event_type: One of SEED_EVENTS
        data: Event fields, flattened into the JSONL record
        level: Log level of the event

    Raises:
        ValueError: If ``event_type`` is not a known seed event
    """
    if event_type not in SEED_EVENTS:
        raise ValueError(f"Unknown seed event: {event_type}")
    get_logger().log(level, event_type, extra={"event_type": event_type, "event_data": dict(data)})
