"""
Logging utilities for the Event Planning Service.
Provides standardized logging configuration.
"""

import logging
import sys


def setup_logging(level: str = "INFO", service_name: str = "eventplanning") -> logging.Logger:
    """
    Setup standardized logging on the root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        service_name: Name of the service for log identification

    Returns:
        Configured service logger
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove handlers installed by earlier calls
    for handler in root.handlers[:]:
        if getattr(handler, "_eventplanning", False):
            root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler._eventplanning = True
    console_handler.setFormatter(logging.Formatter(
        f'[%(asctime)s] {service_name.upper()}: %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root.addHandler(console_handler)

    return logging.getLogger(service_name)
