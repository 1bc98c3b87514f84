from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILE = "unicex.log"

# Per-request chatter from these is only wanted when something goes wrong.
NOISY_LOGGERS = ("aiohttp", "asyncio")


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("UNICEX_LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        log_dir / LOG_FILE,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )


def configure_logging(log_dir: Path | None = None, level: str | None = None) -> None:
    """Route exchange client logs to stderr and, optionally, a rotating file.

    ``level`` wins over UNICEX_LOG_LEVEL; both fall back to INFO. Calling this
    again replaces the handlers installed by a previous call.
    """
    resolved = _resolve_level(level)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        handlers.append(_file_handler(Path(log_dir)))

    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
