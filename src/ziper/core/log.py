"""
Logging setup for the command line.

Info messages are the progress stream and print as-is; everything else
carries a level tag so warnings stand out in long runs.
"""

import logging
import sys
from typing import Optional


class LevelTagFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info and record.levelno >= logging.ERROR:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        if record.levelno == logging.INFO:
            return message
        return f"[{record.levelname}] {message}"


def resolve_level(quiet: bool = False, verbose: bool = False, level: Optional[str] = None) -> int:
    """
    Pick the log level: an explicit level name wins, then --quiet, then --verbose.
    """
    if level:
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, int):
            return resolved
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(quiet: bool = False, verbose: bool = False, level: Optional[str] = None, stream=None) -> int:
    """Install a single stderr handler on the root logger and return the level used."""
    resolved = resolve_level(quiet, verbose, level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LevelTagFormatter())
    logging.basicConfig(level=resolved, handlers=[handler], force=True)
    return resolved
