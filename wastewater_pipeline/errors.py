"""
Pipeline error types.

Store read failures are recovered locally by the file store (an unreadable
store is treated as empty). Everything else is fatal for the run.
"""

from typing import Optional


class PipelineError(RuntimeError):
    """Base class for errors that abort a pipeline run."""


class StoreReadError(PipelineError):
    """Raised when the persisted dataset cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read store {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreWriteError(PipelineError):
    """Raised when the dataset cannot be written back to the store."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot write store {path}: {reason}")
        self.path = path
        self.reason = reason


class RemoteError(PipelineError):
    """Raised when the open-data API call fails or returns an unexpected payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
