"""Logging setup for league history runs."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import get_log_dir
from .diagnostics import DIAGNOSTICS_LOGGER_NAME

LOGGER_NAME = 'leaguehistory'


def setup_logging(
    log_dir: Optional[Path | str] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure handlers on the package logger for one run.

    With log_to_file, two files are written per run: a full log
    (leaguehistory_<timestamp>.log) and a data-quality log
    (diagnostics_<timestamp>.log) holding only the warnings DiagnosticLog
    emits, one line per distinct problem.

    Args:
        log_dir: Directory for log files (default: configured log_dir)
        level: Logging level (default: INFO)
        log_to_file: Whether to write the run and diagnostics logs (default: True)
        log_to_console: Whether to log to stdout (default: True)

    Returns:
        The 'leaguehistory' logger

    Example:
        from leaguehistory.logging_config import setup_logging
        setup_logging(level=logging.WARNING)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Re-running setup replaces handlers rather than stacking them
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    if log_to_file:
        log_dir = Path(log_dir) if log_dir is not None else get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

        run_handler = logging.FileHandler(log_dir / f'leaguehistory_{timestamp}.log')
        run_handler.setLevel(level)
        run_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))
        logger.addHandler(run_handler)

        diagnostics_handler = logging.FileHandler(log_dir / f'diagnostics_{timestamp}.log')
        diagnostics_handler.setLevel(logging.WARNING)
        diagnostics_handler.addFilter(logging.Filter(DIAGNOSTICS_LOGGER_NAME))
        diagnostics_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(diagnostics_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(console_handler)

    return logger
