"""Common functions shared across all processor implementations."""

from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import CodecError, codec_error_handler
from ..core.logging_config import get_logger
from ..core.models import ImageValue
from ..core.naming import destination_for
from ..core.operations import Operation


@dataclass(frozen=True)
class TransformOutcome:
    """Result of one operation: either an image ready to write or an error."""

    operation: Operation
    image: Optional[ImageValue] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


def transform_operation(engine, source: ImageValue, operation: Operation) -> TransformOutcome:
    """Transform → name. Codec failures are captured, not raised."""
    logger = get_logger("processor")
    try:
        with codec_error_handler(operation.label):
            transformed = engine.apply(source, operation)
    except CodecError as e:
        logger.error(f"[{operation.label}] Transform of {source.key} failed: {e}")
        return TransformOutcome(operation=operation, error=str(e))

    bucket, key = destination_for(source.bucket, source.key, operation)
    logger.debug(
        f"[{operation.label}] {source.bucket}/{source.key} -> {bucket}/{key} "
        f"({len(transformed.data)} bytes)"
    )
    return TransformOutcome(operation=operation, image=transformed.with_identity(bucket, key))
