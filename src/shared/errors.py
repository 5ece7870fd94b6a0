"""
Exception types raised by the storage layer.
"""

from typing import Optional


class RecommenderError(Exception):
    """Base class for recommender errors."""


class CollaboratorError(RecommenderError):
    """A storage read failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ReadTimeoutError(CollaboratorError):
    """Storage reads did not finish before the request deadline."""

    def __init__(self, operation: str, timeout: float):
        self.timeout = timeout
        super().__init__(operation)
        self.args = (f"{operation} timed out after {timeout:.1f}s",)
