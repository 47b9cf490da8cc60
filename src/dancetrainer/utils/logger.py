"""Logging configuration for DanceTrainer."""

import logging
import sys
from pathlib import Path
from datetime import datetime


def setup_logger(
    verbose: bool = False, save_to_file: bool = False, log_dir: str = "data/logs"
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        verbose: If True, show DEBUG records on the console, otherwise INFO
        save_to_file: If True, also log to a timestamped file
        log_dir: Directory for log files

    Returns:
        Configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )
    simple_formatter = logging.Formatter("%(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(detailed_formatter if verbose else simple_formatter)

    # Only show our own records in the console
    console_handler.addFilter(lambda record: record.name.startswith("dancetrainer"))

    logger.addHandler(console_handler)

    if save_to_file:
        try:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = path / f"session_{timestamp}.log"

            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            logger.addHandler(file_handler)

            logger.info(f"Logging to file: {log_file}")
        except OSError as e:
            logger.error(f"Failed to create file handler: {e}")

    return logger
