"""
Exception hierarchy for archive runs.

Per-entry errors are built only so the builder can log a uniform message;
they never leave the builder. Fatal errors propagate to the caller.
"""

from typing import Optional


class ZiperError(Exception):
    """Base class for all ziper errors."""


class InvalidPattern(ZiperError):
    """An ignore glob could not be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid ignore pattern {pattern!r}: {reason}")


class SourceNotFoundError(ZiperError):
    """The source path to archive does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Source path does not exist: {path}")


class EntryError(ZiperError):
    """A single walked entry could not be archived."""

    action = "process"

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        message = f"Failed to {self.action} {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class EntryAccessError(EntryError):
    action = "access path"


class FileOpenError(EntryError):
    action = "open file"


class RecordWriteError(EntryError):
    action = "add file"


class FatalArchiveError(ZiperError):
    """The run cannot produce a usable archive."""

    def __init__(self, output: str, cause: Optional[BaseException] = None):
        self.output = output
        self.cause = cause
        super().__init__(self.describe(output, cause))

    @staticmethod
    def describe(output: str, cause: Optional[BaseException]) -> str:
        return f"Archive error for {output}: {cause}"


class SinkCreationError(FatalArchiveError):
    @staticmethod
    def describe(output: str, cause: Optional[BaseException]) -> str:
        return f"Failed to create zip file {output}: {cause}"


class FinalizationError(FatalArchiveError):
    @staticmethod
    def describe(output: str, cause: Optional[BaseException]) -> str:
        return f"Failed to finalize zip file {output}: {cause}"
