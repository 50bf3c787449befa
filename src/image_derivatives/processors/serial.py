"""Serial processor implementation - transforms operations one by one."""

from typing import List, Sequence

from ..core.models import ImageValue
from ..core.operations import Operation
from .common import TransformOutcome, transform_operation


def transform_batch(
    engine, source: ImageValue, operations: Sequence[Operation]
) -> List[TransformOutcome]:
    """
    Transforms every operation serially, in the current thread.

    Args:
        engine: The transform engine applied to each operation.
        source: The shared, read-only source image.
        operations: Operations in declared order.

    Returns:
        One `TransformOutcome` per operation, in the same order.
    """
    return [transform_operation(engine, source, operation) for operation in operations]
