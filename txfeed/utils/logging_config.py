"""
Logging configuration for the txfeed server
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

from txfeed.config import LOG_DIR, LOG_LEVEL

def setup_logging(logger_name: str, log_level: Optional[Union[int, str]] = None,
                  log_dir: Optional[str] = LOG_DIR) -> logging.Logger:
    """
    Set up logging configuration for a specific logger

    Args:
        logger_name: Name of the logger to configure
        log_level: Level number or name, defaults to LOG_LEVEL from the environment
        log_dir: Directory for rotating log files; empty or None logs to console only

    Returns:
        logging.Logger: Configured logger instance
    """
    if log_level is None:
        log_level = LOG_LEVEL
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    # Create logger
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    # Remove any existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        log_file = path / f"{logger_name.replace('.', '_')}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=50*1024*1024,  # 50MB
            backupCount=10
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger

def quiet_noisy_loggers() -> None:
    """Keep HTTP client and scheduler chatter out of the feed logs."""
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('apscheduler').setLevel(logging.WARNING)
