"""Operations: the units of work a configuration expands into."""

from dataclasses import dataclass
from typing import List, Optional, Union

from .config import Config
from .image_utils import ImageFormat


@dataclass(frozen=True)
class ReduceOperation:
    """Recompress without resizing."""

    bucket: Optional[str] = None
    directory: Optional[str] = None
    quality: Optional[int] = None

    @property
    def label(self) -> str:
        return "reduce"


@dataclass(frozen=True)
class BackupOperation:
    """Copy the source bytes unchanged."""

    prefix: str = ""
    suffix: str = ""

    @property
    def label(self) -> str:
        return "backup"


@dataclass(frozen=True)
class ResizeOperation:
    """Scale so the longer side equals ``size``, optionally re-encoding."""

    size: int
    quality: Optional[int] = None
    format: Optional[ImageFormat] = None
    change_extension: bool = False
    index: int = 0

    @property
    def label(self) -> str:
        return f"resizes[{self.index}]"


Operation = Union[ReduceOperation, BackupOperation, ResizeOperation]


def expand_operations(config: Config) -> List[Operation]:
    """
    Expand a configuration into ``[reduce?, backup?, *resizes]``.

    The order is fixed; writes are dispatched in exactly this order.
    """
    operations: List[Operation] = []
    if config.reduce is not None:
        operations.append(
            ReduceOperation(
                bucket=config.reduce.bucket,
                directory=config.reduce.directory,
                quality=config.reduce.quality,
            )
        )
    if config.backup is not None:
        operations.append(
            BackupOperation(prefix=config.backup.prefix, suffix=config.backup.suffix)
        )
    for index, resize in enumerate(config.resizes):
        operations.append(
            ResizeOperation(
                size=resize.size,
                quality=resize.quality,
                format=resize.format,
                change_extension=resize.change_extension,
                index=index,
            )
        )
    return operations
