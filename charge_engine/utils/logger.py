"""
logger.py
----------
📄 Centralized logging utility for the charge engine.

Purpose:
--------
Provides a consistent logging setup for every module (rate tables,
formula evaluation, the charge pipeline, loaders and reports).

Outputs:
---------
✅ Logs to console
✅ Logs to file at <LOG_DIR>/charge_engine.log when LOG_TO_FILE is enabled

Usage Example:
---------------
from charge_engine.utils.logger import get_logger
logger = get_logger(__name__)
logger.info("Charge pipeline started.")
"""

import os
import logging

from charge_engine import config

# ----------------------------------------------------------------------
# 1️⃣ Configure logging format
# ----------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "charge_engine.log"


def get_log_file() -> str:
    """Return the log file path, creating the log directory if missing."""
    os.makedirs(config.LOG_DIR, exist_ok=True)
    return os.path.join(config.LOG_DIR, LOG_FILE_NAME)


# ----------------------------------------------------------------------
# 2️⃣ Logging setup function
# ----------------------------------------------------------------------
def get_logger(name: str = "charge-engine") -> logging.Logger:
    """
    Returns a configured logger instance that logs to the console and,
    optionally, to a file.

    Parameters
    ----------
    name : str
        The name of the logger (typically the module name).

    Returns
    -------
    logging.Logger
        Configured logger object.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    # Avoid duplicate handlers
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # File handler
        if config.LOG_TO_FILE:
            file_handler = logging.FileHandler(get_log_file(), mode="a")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


# ----------------------------------------------------------------------
# 3️⃣ Self-test block (runs only if executed directly)
# ----------------------------------------------------------------------
if __name__ == "__main__":
    test_logger = get_logger("logger_test")
    test_logger.info("✅ Logger initialized successfully.")
    test_logger.warning("⚠️ This is a sample warning.")
    test_logger.error("❌ Example error message.")
