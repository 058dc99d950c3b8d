"""
Logging setup for windsim.

Library modules only create ``logging.getLogger(__name__)`` loggers;
applications call setup_logging() once to route them somewhere.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) output to the windsim logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Threshold for the logger and its handlers
        log_file: File to write a copy of the log to (truncated on open)

    Returns:
        The root ``windsim`` logger
    """
    root = logging.getLogger("windsim")
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.info(f"Logging to stdout{' and ' + log_file if log_file else ''} at level "
              f"{logging.getLevelName(level)}")
    return root
