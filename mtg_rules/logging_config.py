"""
Centralized logging configuration for the MTG rules package.
"""

import logging
import sys
from pathlib import Path
from .config import LOGS_DIR


def setup_logging(log_file: str = "mtg_rules.log", level: int = logging.INFO) -> None:
    """
    Set up centralized logging for the MTG rules package.

    Args:
        log_file: Name of the log file (bare names are placed in LOGS_DIR)
        level: Logging level
    """
    # Avoid duplicate handlers if already configured
    if logging.getLogger().handlers:
        return

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Default to logs dir if bare filename provided
    log_path = Path(log_file)
    if not log_path.is_absolute():
        log_path = LOGS_DIR / log_path.name
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_path))
    except OSError as e:
        root_logger.warning(f"File logging disabled, cannot open {log_path}: {e}")
    else:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    # Reduce noise from external libraries
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
