# COMPONENT: CENTRALIZED LOGGING CONFIGURATION
# REQUIREMENTS SATISFIED: Deterministic logging behavior, environment-controlled verbosity
"""
coi_tracker/utils/logging.py

Provides a centralized logging configuration utility for the COI tracker.
This module configures a shared logger instance ("coi_tracker") whose
behavior is fully controlled via environment variables. Every other module
logs through a child of this logger (e.g. "coi_tracker.store"), so a single
setup call governs the whole package.

Environment Variables:
    LOG_LEVEL:
        0 → Silent (no logs emitted)
        1 → INFO level logging
        2 → DEBUG level logging

    LOG_FILE:
        Optional path to a log file. If provided and valid, logs are written
        to this file. Otherwise, logs fall back to standard error (stderr).

Design Decisions:
    - Logging is isolated from the root logger to prevent duplicate output.
    - Existing handlers are cleared on setup so repeated calls are idempotent.
    - The logger instance is created eagerly at import time.
"""
import os
import sys
import logging

LOGGER_NAME = "coi_tracker"


def setup_logger(level=None, log_file=None):
    """
    Configures and returns the package logger based on LOG_FILE and
    LOG_LEVEL. Explicit arguments take precedence over the environment.
    """
    if log_file is None:
        log_file = os.environ.get("LOG_FILE")

    if level is None:
        try:
            # LOG_LEVEL=0 is silent, 1 is INFO, 2 is DEBUG
            level = int(os.environ.get("LOG_LEVEL", "0"))
        except ValueError:
            level = 0

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False

    if level == 1:
        logger.setLevel(logging.INFO)
    elif level >= 2:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.CRITICAL + 1)

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = None
    if log_file and level > 0:
        try:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError:
            # Invalid path: fall back to console
            handler = logging.StreamHandler(sys.stderr)
    elif level > 0:
        handler = logging.StreamHandler(sys.stderr)

    if handler:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. get_logger("store")."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger = setup_logger()
