# src/image_derivatives/core/error_handling.py

import functools
import logging
import time

from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from .exceptions import CodecError, ImageDerivativesError, StorageError

RETRYABLE_S3_ERROR_CODES = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "SlowDown",
    "RequestTimeout",
)

STORAGE_EXCEPTIONS = (
    ClientError,
    BotoCoreError,
    OSError,
    KeyError,
)

CODEC_EXCEPTIONS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
    KeyError,
)


def with_storage_error_handling(func):
    """
    A decorator translating object storage failures into ``StorageError``.

    Covers botocore errors as well as socket errors raised while streaming a
    body and a response missing the fields the caller reads.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except ImageDerivativesError:
            raise
        except STORAGE_EXCEPTIONS as e:
            logger.error(f"Storage error in '{func.__name__}': {e}")
            raise StorageError(f"S3 operation failed in {func.__name__}: {e}") from e
    return wrapper


def with_error_handling(func):
    """
    A decorator translating Pillow decode/encode failures into ``CodecError``.

    Pipeline exceptions pass through untouched.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except ImageDerivativesError:
            raise
        except CODEC_EXCEPTIONS as e:
            logger.error(f"Codec error in '{func.__name__}': {e}")
            raise CodecError(f"Image codec failed in {func.__name__}: {e}") from e
    return wrapper


def is_retryable(error: StorageError) -> bool:
    cause = error.__cause__
    if isinstance(cause, ClientError):
        return cause.response.get('Error', {}).get('Code') in RETRYABLE_S3_ERROR_CODES
    return False


def retry_s3_operation(max_attempts=3, initial_delay=0.5, backoff_factor=2):
    """
    Decorator to retry throttled S3 operations with exponential backoff.

    Only ``StorageError`` caused by a throttling code is retried; anything
    else is raised on the first attempt.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            attempts = 0
            delay = initial_delay
            while True:
                try:
                    return func(*args, **kwargs)
                except StorageError as e:
                    attempts += 1
                    if not is_retryable(e):
                        raise
                    if attempts >= max_attempts:
                        logger.error(
                            f"S3 operation '{func.__name__}' failed after {max_attempts} attempts. Error: {e}"
                        )
                        raise
                    logger.info(
                        f"S3 operation '{func.__name__}' throttled. Attempt {attempts}/{max_attempts}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )
                    time.sleep(delay)
                    delay *= backoff_factor
        return wrapper
    return decorator


class BatchOperationContextManager:
    """
    Context manager collecting per-operation failures and summarizing them.
    """
    def __init__(self, operation_name="Batch Operation"):
        self.operation_name = operation_name
        self.errors = []
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i+1}/{len(self.errors)} for item '{error_detail['item']}': {error_detail['error']}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}"
            )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")
        return False

    @property
    def failed_items(self):
        return [error["item"] for error in self.errors]

    def add_error(self, error_message: str, item_identifier: str = "Unknown item"):
        """
        Report an error for a specific item within the 'with' block.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): A string identifying the item that failed.
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}")
