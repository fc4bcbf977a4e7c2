"""
Logging Configuration for the Projection Engine.

Projection calls are expected to run millions of times, so per-call
messages (undefined results, iteration failures) are emitted at DEBUG and
cost nothing unless a caller lowers the level. Construction of a
projection is logged once at DEBUG with its derived constants, which is
usually the first thing needed when a grid does not reproduce a published
value.
"""

import logging
import sys


# Configure a logger for a package module
def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the projection engine.
    
    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.
        
    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    
    logger.setLevel(level)
    return logger


def set_level(level: int, prefix: str = "") -> None:
    """Set the level of every engine logger created so far.
    
    Parameters
    ----------
    level : int
        New logging level, e.g. ``logging.DEBUG``.
    prefix : str
        Only loggers whose name starts with this prefix are changed.
    """
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.startswith(prefix) and logger.handlers:
            logger.setLevel(level)
