"""structlog setup: JSON lines to a global log, an error log and one file per source."""

from __future__ import annotations

import logging
import logging.config
import os
from collections import deque
from pathlib import Path

import structlog
from pythonjsonlogger import jsonlogger

LOGGER_NAME = "release_tracker"
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def default_log_dir() -> Path:
    home = os.environ.get("RELEASE_TRACKER_HOME")
    if home:
        return Path(home).expanduser().resolve() / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def log_path(source: str | None = None) -> Path:
    """Global log file, or the file of one source."""

    if source:
        return default_log_dir() / "sources" / f"{source}.log"
    return default_log_dir() / "tracker.log"


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Install handlers once per process and return the application logger.

    Console output stays at WARNING unless ``verbose`` so it does not mix
    with the CLI's own tables.
    """

    global _configured
    if not _configured:
        log_dir = default_log_dir()
        (log_dir / "sources").mkdir(parents=True, exist_ok=True)
        handlers = {
            "console": {"class": "logging.StreamHandler", "level": "DEBUG" if verbose else "WARNING"},
            "tracker_file": {"class": "logging.FileHandler", "level": "INFO", "filename": str(log_path())},
            "error_file": {
                "class": "logging.FileHandler",
                "level": "ERROR",
                "filename": str(log_dir / "error.log"),
            },
        }
        for handler in handlers.values():
            handler["formatter"] = "json"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {"json": {"()": jsonlogger.JsonFormatter, "fmt": JSON_FIELDS}},
                "handlers": handlers,
                "loggers": {
                    LOGGER_NAME: {
                        "handlers": list(handlers),
                        "level": "DEBUG" if verbose else "INFO",
                        "propagate": False,
                    }
                },
            }
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _configured = True
    return structlog.get_logger(LOGGER_NAME)


def source_logger(source_name: str) -> structlog.BoundLogger:
    """Logger bound to ``source_name`` that also writes ``logs/sources/<name>.log``.

    Records still propagate to the global handlers.
    """

    configure_logging()
    path = log_path(source_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    std_logger = logging.getLogger(f"{LOGGER_NAME}.source.{source_name}")
    if not any(getattr(handler, "baseFilename", None) == str(path) for handler in std_logger.handlers):
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FIELDS))
        std_logger.addHandler(handler)
    return structlog.get_logger(std_logger.name).bind(source=source_name)


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        return list(deque(stream, maxlen=line_count))


def available_source_logs() -> list[Path]:
    return sorted((default_log_dir() / "sources").glob("*.log"))


__all__ = [
    "available_source_logs",
    "configure_logging",
    "default_log_dir",
    "log_path",
    "source_logger",
    "tail_log",
]
