"""
Logging Configuration Module

Provides structured logging that auto-disables in frozen (PyInstaller) builds.
Console output only in development; no file logging.
"""
import logging
import sys

# Cache configured loggers to avoid duplicate handlers
_loggers: dict[str, logging.Logger] = {}

_level: int = logging.DEBUG


def set_log_level(level: int) -> None:
    """Change the level of every logger handed out so far, and of later ones."""
    global _level
    _level = level

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger for the given module name.
    
    In frozen (PyInstaller/exe) builds, logging is disabled to avoid
    console window pop-ups. In development, logs go to console.
    
    Args:
        name: Logger name (typically __name__ of the calling module)
        
    Returns:
        Configured Logger instance
    """
    if name in _loggers:
        return _loggers[name]
    
    logger = logging.getLogger(name)
    logger.setLevel(_level)
    
    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False
    
    if not logger.handlers:
        if getattr(sys, 'frozen', False):
            logger.addHandler(logging.NullHandler())
        else:
            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(_level)
            handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
            logger.addHandler(handler)
    
    _loggers[name] = logger
    return logger
