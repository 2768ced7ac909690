"""
Utility functions for the Karlin simulator

Provides logging setup and random source construction.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import numpy as np

from .config import LoggingConfig


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        config: Logging configuration

    Returns:
        Configured logger
    """
    if config.log_to_file:
        log_dir = Path(config.log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)

    log_level = getattr(logging, config.log_level.upper())

    # Remove existing handlers
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logging.root.addHandler(console_handler)

    if config.log_to_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logging.root.addHandler(file_handler)

    logging.root.setLevel(log_level)

    logger = logging.getLogger('karlin_sim')
    logger.debug(f"Logging configured - Level: {config.log_level}")
    return logger


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random source for samplers and trace generation; unseeded when ``seed`` is None."""
    return np.random.default_rng(seed)
