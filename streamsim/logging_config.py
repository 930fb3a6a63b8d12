"""
Centralized logging configuration for StreamSim.
Loads logging settings from a JSON dictConfig file or falls back to defaults.

The library itself never configures logging on import; applications and
example scripts call setup_logging() once at start-up.
"""

import json
import logging
import logging.config
import os
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config_path: Optional[str] = None, level: int = logging.INFO) -> None:
    """
    Configure logging from a JSON config file or use defaults.

    Args:
        config_path: Path to a ``logging.config.dictConfig`` JSON file.
                     If None, missing or invalid, defaults are used.
        level: Root level for the default configuration.
    """
    if config_path is not None and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
            logging.config.dictConfig(config)
            return
        except (json.JSONDecodeError, ValueError, KeyError) as e:
            logging.getLogger(__name__).warning(
                "Failed to load logging config from %s: %s; falling back to defaults", config_path, e)

    _setup_default_logging(level)


def _setup_default_logging(level: int) -> None:
    """Setup default logging configuration if config file is unavailable."""
    logging.basicConfig(
        level=level,
        format=DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Buffer allocation messages are noise outside of debugging sessions
    logging.getLogger('streamsim.stream').setLevel(max(level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name, typically __name__ from the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)
