"""Protocol definitions for dependency injection and testability."""

from typing import Any, Callable, Dict, List, Protocol, Sequence

from .models import ImageValue, StorageEvent


class S3ClientProtocol(Protocol):
    """Protocol for S3 client operations."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class FileSystemProtocol(Protocol):
    """Storage the orchestrator reads the source from and writes outputs to."""

    def fetch(self, event: StorageEvent) -> ImageValue:
        """Resolve an event into the source image."""
        ...

    def write(self, image: ImageValue) -> ImageValue:
        """Durably store an image at its (bucket, key); echoes it back."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


# (engine, source, operations) -> outcomes in the order of ``operations``
BatchTransformer = Callable[[Any, ImageValue, Sequence[Any]], List[Any]]
