#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Logging Setup
================================================================================

Project:        Van der Waals Box
Module:         logger_setup.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "vdwbox"
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    fmt: str = DEFAULT_FORMAT,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the dedicated "vdwbox" logger (not the root logger).

    Logs go to the console and, when log_dir is given, to
    log_dir/simulation.log. Keeping the root logger untouched keeps numba's
    verbose compiler logs out of the output.

    Args:
        level: Logging level name, e.g. "DEBUG" or "INFO"
        fmt: logging.Formatter format string
        log_dir: Directory for the run log file, created if missing

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Do not propagate to the root logger
    logger.propagate = False

    formatter = logging.Formatter(fmt)

    # Clear existing handlers to avoid duplication if called again
    if logger.hasHandlers():
        logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, "simulation.log")
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info("Logging initialized. Log file: %s", log_file)

    return logger
