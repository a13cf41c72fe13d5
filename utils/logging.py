import logging
from pathlib import Path
from typing import Optional
import sys
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, log_file: Optional[Path] = None) -> logging.Logger:
    """Get a logger with console output and a per-module log file"""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Handlers decide what is emitted

    # Clear existing handlers to avoid duplicates
    if logger.handlers:
        logger.handlers = []

    # Console goes to stderr so command output on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(os.getenv("PROMPTIFY_LOG_LEVEL", "WARNING").upper())
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_file is None:
        logs_dir = Path(os.getenv("PROMPTIFY_LOG_DIR", "logs"))
        log_file = logs_dir / f"{name.replace('.', '_')}.log"

    # Create logs directory if it doesn't exist
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)

    # Records stop here instead of being duplicated by the root logger
    logger.propagate = False

    return logger
