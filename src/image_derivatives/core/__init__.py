"""Core models, services and shared utilities for image derivatives."""

from .logging_config import (
    configure_multiprocessing_logging,
    get_logger,
    setup_logger,
)
from .exceptions import (
    ImageDerivativesError,
    CodecError,
    ConfigurationError,
    PartialProcessingError,
    StorageError,
)
from .image_utils import ImageFormat
from .models import ImageValue, StorageEvent
from .config import BackupOptions, Config, ReduceOptions, ResizeOptions, load_config
from .operations import (
    BackupOperation,
    Operation,
    ReduceOperation,
    ResizeOperation,
    expand_operations,
)
from .naming import destination_for
from .services import CodecErrorPolicy, ImageProcessor, S3FileSystem, TransformEngine

__all__ = [
    "BackupOperation",
    "BackupOptions",
    "CodecError",
    "CodecErrorPolicy",
    "Config",
    "ConfigurationError",
    "ImageDerivativesError",
    "ImageFormat",
    "ImageProcessor",
    "ImageValue",
    "Operation",
    "PartialProcessingError",
    "ReduceOperation",
    "ReduceOptions",
    "ResizeOperation",
    "ResizeOptions",
    "S3FileSystem",
    "StorageError",
    "StorageEvent",
    "TransformEngine",
    "configure_multiprocessing_logging",
    "destination_for",
    "expand_operations",
    "get_logger",
    "load_config",
    "setup_logger",
]
