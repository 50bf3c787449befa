"""Custom exceptions and error handling utilities for image derivatives."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, List, Optional


class ImageDerivativesError(Exception):
    """Base exception for all image derivatives errors."""


class StorageError(ImageDerivativesError):
    """Error raised when fetching or writing an object fails."""


class ConfigurationError(ImageDerivativesError):
    """Error raised for invalid configuration options."""

    def __init__(self, message: str, location: Optional[str] = None):
        super().__init__(message)
        self.location = location


class CodecError(ImageDerivativesError):
    """Error raised when decoding, resizing or encoding an image fails."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class PartialProcessingError(CodecError):
    """Some outputs were written, others failed to transform."""

    def __init__(self, written: int, failures: List[str]):
        super().__init__(
            f"{len(failures)} operation(s) failed after writing {written} image(s): "
            + ", ".join(failures),
            operation=failures[0] if failures else None,
        )
        self.written = written
        self.failures = failures

    def __reduce__(self):
        return (self.__class__, (self.written, self.failures))


@contextmanager
def codec_error_handler(operation: Optional[str] = None) -> Any:
    """Context manager scoping any failure inside it to one operation."""
    try:
        yield
    except CodecError as exc:
        if exc.operation is None:
            exc.operation = operation
        raise
    except ImageDerivativesError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise CodecError(str(exc), operation=operation) from exc
