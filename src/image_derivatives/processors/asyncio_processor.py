"""AsyncIO processor implementation - gathers executor-backed transforms."""

import asyncio
from typing import List, Sequence

from ..core.models import ImageValue
from ..core.operations import Operation
from .common import TransformOutcome, transform_operation


async def transform_batch_async(
    engine, source: ImageValue, operations: Sequence[Operation]
) -> List[TransformOutcome]:
    """Run every transform in the default executor; gather keeps input order."""
    loop = asyncio.get_running_loop()
    tasks = [
        loop.run_in_executor(None, transform_operation, engine, source, operation)
        for operation in operations
    ]
    return list(await asyncio.gather(*tasks))


def transform_batch(
    engine, source: ImageValue, operations: Sequence[Operation]
) -> List[TransformOutcome]:
    """
    Transform a batch using asyncio.

    This is the synchronous wrapper that runs the async function in a fresh
    event loop, so it must not be called from inside a running loop.
    """
    return asyncio.run(transform_batch_async(engine, source, operations))
