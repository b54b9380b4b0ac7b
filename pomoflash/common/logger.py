import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from pomoflash.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# POMOFLASH_LOG_LEVEL takes a level name ("INFO") or number ("20"); POMOFLASH_LOG_CONSOLE=1 mirrors the log to stderr.
LEVEL_ENV = "POMOFLASH_LOG_LEVEL"
CONSOLE_ENV = "POMOFLASH_LOG_CONSOLE"
_TRUTHY = {"1", "true", "yes", "on"}


def level_from_env(default=logging.DEBUG) -> int:
    raw = (os.getenv(LEVEL_ENV) or "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def console_from_env(default=False) -> bool:
    raw = os.getenv(CONSOLE_ENV)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


# Adds the handler built by `build()` under `handler_name` unless the logger already carries one by that name, so
# repeated calls (and re-imports under test runners) never double up output.
def _attach(logger, handler_name, build, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return False
    handler = build()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return True


# Keeps only the newest `keep` per-run debug logs.
def _prune_runs(folder: Path, name, keep):
    runs = sorted(folder.glob(f"{name}_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for run in runs[keep:]:
        try:
            run.unlink()
        except OSError as e:
            logging.getLogger(name).debug(f"Could not prune old debug log {run.name}: {e}")


def get_logger(
        name = "pomoflash",
        level: int | None = None,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        console: bool | None = None,
        historical_debugs: int = 10
) -> logging.Logger:
    level = level_from_env() if level is None else level
    console = console_from_env() if console is None else console

    logger = logging.getLogger(name)
    logger.propagate = False
    # The per-run debug file always wants everything, whatever the other handlers are set to.
    logger.setLevel(min(level, logging.DEBUG) if historical_debugs > 0 else level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    # Rotating log that survives across runs, plus a latest-only copy overwritten each run
    _attach(logger, f"{name}:persistent", lambda: RotatingFileHandler(
        filename=log_dir / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
    ), level, fmt)
    _attach(logger, f"{name}:latest", lambda: logging.FileHandler(
        filename=log_dir / "latest.log", mode="w", encoding="utf-8",
    ), level, fmt)

    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True, exist_ok=True)
        added = _attach(logger, f"{name}:historical_debug", lambda: logging.FileHandler(
            filename=debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log", encoding="utf-8",
        ), logging.DEBUG, fmt)
        if added:
            _prune_runs(debug_dir, name, historical_debugs)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

log = get_logger()
