"""Processor strategies scheduling the independent per-operation transforms."""

from ..core.exceptions import ConfigurationError
from .common import TransformOutcome, transform_operation
from .serial import transform_batch as serial_transform_batch
from .multiprocess import transform_batch as multiprocess_transform_batch
from .multithread import transform_batch as multithread_transform_batch
from .asyncio_processor import transform_batch as asyncio_transform_batch

PROCESSORS = {
    "serial": serial_transform_batch,
    "multithread": multithread_transform_batch,
    "multiprocess": multiprocess_transform_batch,
    "asyncio": asyncio_transform_batch,
}


def get_batch_transformer(name: str):
    """Look up a processor strategy by name."""
    try:
        return PROCESSORS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown processor {name!r}, expected one of: {', '.join(PROCESSORS)}"
        ) from None


__all__ = [
    "PROCESSORS",
    "TransformOutcome",
    "get_batch_transformer",
    "transform_operation",
    "serial_transform_batch",
    "multiprocess_transform_batch",
    "multithread_transform_batch",
    "asyncio_transform_batch",
]
