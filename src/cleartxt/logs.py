import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

def setup_logging(log_dir: Optional[Union[str, Path]] = None, level_name: Optional[str] = None):
    """Set up logging configuration for the cleartxt package with environment-based levels."""
    # Determine log level from environment, then from settings
    env_level = os.getenv('CLEARTXT_LOG_LEVEL', '').upper() or (level_name or '').upper()
    is_debug = os.getenv('CLEARTXT_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Default to WARNING for regular users
    if is_debug:
        level = logging.DEBUG
    elif env_level:
        level = getattr(logging, env_level, logging.WARNING)
    else:
        level = logging.WARNING

    log_format = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    detailed_formatter = logging.Formatter(log_format, date_format)
    console_formatter = logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if is_debug
        else '%(levelname)s: %(message)s'
    )

    logger = logging.getLogger('cleartxt')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    logger.handlers.clear()

    # File handler (always detailed) - skipped when the log dir is unusable
    if log_dir is not None:
        log_dir = Path(log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_dir / "cleartxt.log", encoding="utf-8")
        except OSError as e:
            sys.stderr.write(f"cleartxt: file logging disabled ({e})\n")
        else:
            file_handler.setFormatter(detailed_formatter)
            file_handler.setLevel(logging.DEBUG)
            logger.addHandler(file_handler)

    # Console handler (respects environment level); stderr keeps CLI output clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'cleartxt.{name}')
    return logging.getLogger('cleartxt')
