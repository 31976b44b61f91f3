"""
Run logging helpers.

Each synthesizer run gets its own timestamped log file plus a stderr handler
that only surfaces warnings. ``quiet`` keeps the file handler at WARNING so a
run leaves a record of problems without the per-row chatter.
"""

import logging
from datetime import datetime
from pathlib import Path

_FILE_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "quiet": logging.WARNING,
}


def _resolve_log_dir(log_dir):
    default_log_dir = Path.cwd() / "logs"
    if log_dir is None:
        return default_log_dir
    text = str(log_dir).strip()
    return Path(text).expanduser() if text else default_log_dir


def close_run_logger(logger):
    """Detach and close every handler attached to ``logger``."""

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        try:
            handler.close()
        except Exception:
            pass


def setup_run_logger(log_dir=None, name="bellgen", level="info"):
    resolved_log_dir = _resolve_log_dir(log_dir)
    resolved_log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = resolved_log_dir / f"run_{timestamp}.log"

    file_level = _FILE_LEVELS.get(str(level).strip().lower(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(min(file_level, logging.WARNING))
    logger.propagate = False
    close_run_logger(logger)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    )
    logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.WARNING)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    return logger, str(log_path)
