from __future__ import annotations

import json as jsonlib
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Union

from infra.paths import LOG_DIR

if TYPE_CHECKING:
    from infra.settings import EngineSettings

# Process logging for the engine and its shells. Game narration goes to the
# battle log on the GameState, not here.
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"

# Third-party loggers that are too chatty at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; messages are escaped, not pasted into a template."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "line": record.lineno,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return jsonlib.dumps(payload)


def _handlers(formatter: logging.Formatter, logfile: str | Path | None) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if logfile is not None:
        log_path = Path(logfile)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    level: Union[str, int] = "INFO",
    *,
    json: bool = False,
    logfile: str | Path | None = LOG_DIR / "engine.log",
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configure the root logger with stdout + optional file handler.

    Calling it again replaces the previous handlers.

    Args:
        level: Logging level name or int (e.g., "DEBUG", logging.INFO).
        json: Emit JSON lines when True; otherwise a human-friendly format.
        logfile: File path to append logs; set to None to disable file output.
        quiet: Logger names capped at WARNING regardless of ``level``.
    """
    formatter = JsonLineFormatter() if json else logging.Formatter(DEFAULT_FORMAT)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in _handlers(formatter, logfile):
        root.addHandler(handler)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)


def configure_from_settings(settings: EngineSettings) -> None:
    """Apply the ENGINE_LOG_* settings."""
    configure_logging(settings.log_level, json=settings.log_json, logfile=settings.logfile)


def get_logger(name: str) -> logging.Logger:
    """Namespaced logger; records propagate to whatever configure_logging() set up."""
    return logging.getLogger(name)
