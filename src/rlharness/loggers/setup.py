"""Process-level logging configuration using rich's handler."""

import logging
import os
from typing import Optional

from rich.logging import RichHandler


def get_log_level(provided_level: Optional[str] = None) -> str:
    """Resolve the log level: ``LOG_LEVEL`` env var, then ``provided_level``, then INFO."""
    env_level = os.environ.get("LOG_LEVEL")
    if env_level:
        return env_level.upper()
    if provided_level:
        return provided_level.upper()
    return "INFO"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Install a single ``RichHandler`` on the root logger.

    Calling this more than once replaces the previous handler.

    Returns:
        The ``rlharness`` package logger
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(get_log_level(level))
    return logging.getLogger("rlharness")


__all__ = ['setup_logging', 'get_log_level']
