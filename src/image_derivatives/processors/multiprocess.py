"""Multiprocess processor implementation - uses process pool for parallelism."""

import os
from typing import List, Sequence
from concurrent.futures import ProcessPoolExecutor

from ..core.logging_config import configure_multiprocessing_logging
from ..core.models import ImageValue
from ..core.operations import Operation
from .common import TransformOutcome, transform_operation


def transform_operation_worker(engine, source: ImageValue, operation: Operation) -> TransformOutcome:
    """
    Worker function designed for use with a `ProcessPoolExecutor`.

    Engine, source and operation are pickled into the worker; the outcome is
    pickled back.
    """
    configure_multiprocessing_logging()
    return transform_operation(engine, source, operation)


def transform_batch(
    engine, source: ImageValue, operations: Sequence[Operation]
) -> List[TransformOutcome]:
    """Transform operations on a process pool, keeping declared order."""
    if not operations:
        return []

    max_workers = min(os.cpu_count() or 1, len(operations))
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(transform_operation_worker, engine, source, operation)
            for operation in operations
        ]
        return [future.result() for future in futures]
