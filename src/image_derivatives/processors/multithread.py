"""Multithreaded processor implementation - uses thread pool for parallelism."""

from typing import List, Sequence
from concurrent.futures import ThreadPoolExecutor

from ..core.models import ImageValue
from ..core.operations import Operation
from .common import TransformOutcome, transform_operation

MAX_WORKERS = 8


def transform_batch(
    engine, source: ImageValue, operations: Sequence[Operation]
) -> List[TransformOutcome]:
    """
    Transform operations on a thread pool.

    Pillow releases the GIL while encoding and decoding, so threads give real
    parallelism here. Futures are collected in submission order, never in
    completion order.
    """
    if not operations:
        return []

    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(operations))) as executor:
        futures = [
            executor.submit(transform_operation, engine, source, operation)
            for operation in operations
        ]
        return [future.result() for future in futures]
