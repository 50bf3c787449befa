"""Shared data models for image derivatives."""

import posixpath
from typing import Any, Dict, List, Mapping
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict

from .exceptions import StorageError


CONTENT_TYPES: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}


def split_key(key: str) -> tuple:
    """Split a key into (directory, stem, extension).

    The directory keeps its trailing slash (or is empty) and the extension
    keeps its leading dot (or is empty), so the three parts concatenate back
    to the key.
    """
    directory, basename = posixpath.split(key)
    if directory:
        directory += "/"
    stem, extension = posixpath.splitext(basename)
    return directory, stem, extension


class ImageValue(BaseModel):
    """An immutable image travelling through the pipeline."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    data: bytes

    @property
    def directory(self) -> str:
        return split_key(self.key)[0]

    @property
    def basename(self) -> str:
        return posixpath.basename(self.key)

    @property
    def stem(self) -> str:
        return split_key(self.key)[1]

    @property
    def extension(self) -> str:
        return split_key(self.key)[2]

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES.get(self.extension.lower(), "application/octet-stream")

    def with_data(self, data: bytes) -> "ImageValue":
        """Return a copy carrying new bytes and the same identity."""
        return ImageValue(bucket=self.bucket, key=self.key, data=data)

    def with_identity(self, bucket: str, key: str) -> "ImageValue":
        """Return a copy carrying the same bytes under a new identity."""
        return ImageValue(bucket=bucket, key=key, data=self.data)

    def __repr__(self) -> str:
        return f"ImageValue(bucket={self.bucket!r}, key={self.key!r}, size={len(self.data)})"


class StorageEvent(BaseModel):
    """The (bucket, key) pair of an object-storage put notification."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "StorageEvent":
        """Build an event from one ``Records[]`` entry of an S3 notification.

        Object keys arrive URL-encoded, with spaces as ``+``.
        """
        try:
            s3 = record["s3"]
            return cls(
                bucket=s3["bucket"]["name"],
                key=unquote_plus(s3["object"]["key"]),
            )
        except (KeyError, TypeError) as exc:
            raise StorageError(f"Malformed S3 event record: missing {exc}") from exc

    @classmethod
    def from_notification(cls, payload: Mapping[str, Any]) -> List["StorageEvent"]:
        """Build one event per record of a full S3 notification payload."""
        if not isinstance(payload, Mapping):
            raise StorageError(
                f"S3 notification must be an object, got {type(payload).__name__}"
            )
        records = payload.get("Records", [])
        if not isinstance(records, list):
            raise StorageError(
                f"S3 notification Records must be a list, got {type(records).__name__}"
            )
        return [cls.from_record(record) for record in records]

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"
