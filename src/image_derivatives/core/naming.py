"""Naming policy: where each derived image is written."""

from typing import Optional, Tuple

from .models import split_key
from .operations import BackupOperation, Operation, ReduceOperation, ResizeOperation


def relocate_key(source_key: str, directory: Optional[str]) -> str:
    """
    Move a key's basename under ``directory``.

    No directory keeps the key as is. A directory starting with ``./`` is
    resolved against the source key's own directory; any other directory is
    taken from the bucket root.
    """
    if directory is None:
        return source_key

    source_dir, stem, extension = split_key(source_key)
    basename = stem + extension
    if directory.startswith("./"):
        directory = source_dir + directory[2:]

    directory = directory.strip("/")
    if not directory:
        return basename
    return f"{directory}/{basename}"


def decorate_key(source_key: str, prefix: str = "", suffix: str = "") -> str:
    """Wrap the stem of a key: ``dir/photo.jpg`` -> ``dir/<prefix>photo<suffix>.jpg``."""
    directory, stem, extension = split_key(source_key)
    return f"{directory}{prefix}{stem}{suffix}{extension}"


def replace_extension(source_key: str, extension: str) -> str:
    """Swap the extension of a key, appending it when the key has none."""
    directory, stem, _ = split_key(source_key)
    return f"{directory}{stem}{extension}"


def destination_for(bucket: str, key: str, operation: Operation) -> Tuple[str, str]:
    """Compute the (bucket, key) a given operation writes to."""
    if isinstance(operation, ReduceOperation):
        return operation.bucket or bucket, relocate_key(key, operation.directory)

    if isinstance(operation, BackupOperation):
        return bucket, decorate_key(key, operation.prefix, operation.suffix)

    if isinstance(operation, ResizeOperation):
        if operation.change_extension and operation.format is not None:
            return bucket, replace_extension(key, operation.format.extension)
        return bucket, key

    raise TypeError(f"Unknown operation: {operation!r}")
