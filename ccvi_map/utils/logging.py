"""
Logging Configuration Module

Every module logs through ``get_logger(__name__)``; ``setup_logging``
attaches console and file handlers to the ``ccvi_map`` package logger once,
from the ``logging`` section of the configuration.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

ROOT_LOGGER_NAME = 'ccvi_map'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _build_handlers(log_file: Optional[Path], console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    return handlers


def setup_logging(
    log_file: Optional[Path] = None,
    log_level: Union[str, int] = "INFO",
    console: bool = True
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the handlers of the previous call, so the CLI
    and tests can reconfigure without duplicated output.

    Parameters
    ----------
    log_file : Path, optional
        Log file, created with its parent directory (default: None, no file)
    log_level : str or int, optional
        Level name such as "DEBUG", or a logging constant (default: "INFO");
        unknown names fall back to INFO
    console : bool, optional
        Also log to stdout (default: True)

    Returns
    -------
    logging.Logger
        The ``ccvi_map`` logger
    """
    if isinstance(log_level, int):
        level = log_level
    else:
        level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(log_file, console):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Logger for a module; names outside the package are nested under it."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
