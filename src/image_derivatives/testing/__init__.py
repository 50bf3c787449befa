"""Testing utilities and fakes for image derivatives."""

from .fakes import (
    FakeLogger,
    FakeS3Client,
    InMemoryFileSystem,
    S3Bucket,
    S3Object,
    client_error,
    create_animated_image,
    create_s3_event,
    create_test_image,
    setup_test_s3_environment,
)

__all__ = [
    "FakeLogger",
    "FakeS3Client",
    "InMemoryFileSystem",
    "S3Bucket",
    "S3Object",
    "client_error",
    "create_animated_image",
    "create_s3_event",
    "create_test_image",
    "setup_test_s3_environment",
]
