"""Service implementations: transform engine, S3 storage and the orchestrator."""

import time
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .config import Config
from .error_handling import (
    BatchOperationContextManager,
    retry_s3_operation,
    with_storage_error_handling,
)
from .exceptions import CodecError, ConfigurationError, PartialProcessingError
from .image_utils import (
    ImageFormat,
    decode_image,
    encode_frames,
    encode_image,
    resize_frames,
    source_format,
)
from .models import ImageValue, StorageEvent
from .observability import LogContext, MetricsCollector, StructuredLogger, timed_operation
from .operations import (
    BackupOperation,
    Operation,
    ReduceOperation,
    ResizeOperation,
    expand_operations,
)
from .protocols import (
    BatchTransformer,
    FileSystemProtocol,
    LoggerProtocol,
    S3ClientProtocol,
)


class TransformEngine:
    """Pure image transformation service with no I/O dependencies.

    Holds no state, so one instance can be shared by threads or pickled into
    worker processes.
    """

    def apply(self, image: ImageValue, operation: Operation) -> ImageValue:
        """Produce the transformed image; identity is left to the naming policy."""
        if isinstance(operation, BackupOperation):
            return image.with_data(image.data)
        if isinstance(operation, ReduceOperation):
            return image.with_data(self.reduce(image.data, operation.quality))
        if isinstance(operation, ResizeOperation):
            return image.with_data(
                self.resize(
                    image.data, operation.size, operation.format, operation.quality
                )
            )
        raise TypeError(f"Unknown operation: {operation!r}")

    def reduce(self, image_bytes: bytes, quality: Optional[int] = None) -> bytes:
        """Re-encode in the source format at the same dimensions and frame count."""
        image = decode_image(image_bytes)
        return encode_image(image, source_format(image), quality, optimize=True)

    def resize(
        self,
        image_bytes: bytes,
        size: int,
        image_format: Optional[ImageFormat] = None,
        quality: Optional[int] = None,
    ) -> bytes:
        """Scale the longer side to ``size`` and encode in the target format.

        Animations keep every frame when the target format can store them.
        """
        image = decode_image(image_bytes)
        target_format = image_format or source_format(image)
        info = dict(image.info)
        return encode_frames(resize_frames(image, size), target_format, quality, info=info)


class S3FileSystem:
    """Storage backed by an S3 client."""

    def __init__(self, s3_client: S3ClientProtocol, logger: LoggerProtocol):
        self._s3_client = s3_client
        self._logger = logger

    @retry_s3_operation()
    @with_storage_error_handling
    def fetch(self, event: StorageEvent) -> ImageValue:
        """Download the object an event points at."""
        self._logger.debug(f"Downloading {event}")
        response = self._s3_client.get_object(Bucket=event.bucket, Key=event.key)
        data = response["Body"].read()
        self._logger.info(f"Downloaded {event}", size=len(data))
        return ImageValue(bucket=event.bucket, key=event.key, data=data)

    @retry_s3_operation()
    @with_storage_error_handling
    def write(self, image: ImageValue) -> ImageValue:
        """Upload an image to its bucket and key."""
        self._logger.debug(f"Uploading s3://{image.bucket}/{image.key}")
        self._s3_client.put_object(
            Bucket=image.bucket,
            Key=image.key,
            Body=image.data,
            ContentType=image.content_type,
        )
        self._logger.info(
            f"Uploaded s3://{image.bucket}/{image.key}", size=len(image.data)
        )
        return image


class CodecErrorPolicy(str, Enum):
    """What a run does when one operation cannot be transformed."""

    ABORT = "abort"
    CONTINUE = "continue"

    @classmethod
    def parse(cls, value: Union[str, "CodecErrorPolicy"]) -> "CodecErrorPolicy":
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(policy.value for policy in cls)
            raise ConfigurationError(
                f"Unknown codec error policy {value!r}, expected one of: {choices}"
            ) from None


class ImageProcessor:
    """
    Turns one uploaded image into the derived images a configuration asks for.

    The source is fetched once, every operation is transformed through the
    batch transformer, and outputs are written in configuration order:
    reduce, backup, then resizes as declared.
    """

    def __init__(
        self,
        file_system: FileSystemProtocol,
        event: StorageEvent,
        logger: Optional[LoggerProtocol] = None,
        batch_transformer: Optional[BatchTransformer] = None,
        engine: Optional[TransformEngine] = None,
        codec_error_policy: Union[str, CodecErrorPolicy] = CodecErrorPolicy.ABORT,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        if batch_transformer is None:
            from ..processors.serial import transform_batch as batch_transformer

        self._file_system = file_system
        self._event = event
        self._logger = logger or StructuredLogger("image_processor")
        self._batch_transformer = batch_transformer
        self._engine = engine or TransformEngine()
        self._policy = CodecErrorPolicy.parse(codec_error_policy)
        self._metrics_collector = metrics_collector

    @property
    def event(self) -> StorageEvent:
        return self._event

    def run(self, config: Union[Config, Mapping[str, Any]]) -> int:
        """
        Produce and write every configured output.

        Args:
            config: A ``Config`` or the raw mapping to validate into one.

        Returns:
            Number of images written.

        Raises:
            ConfigurationError: Invalid configuration; nothing was fetched.
            StorageError: Fetch or write failed.
            CodecError: A transform failed (see ``CodecErrorPolicy``).
        """
        if not isinstance(config, Config):
            config = Config.from_mapping(config)

        operations = expand_operations(config)
        log_context = LogContext(
            correlation_id=f"img_{self._event.key}_{int(time.time() * 1000)}",
            operation="run",
            component="image_processor",
        ).with_metadata(source=str(self._event))

        if not operations:
            self._logger.info("No operations configured", log_context)
            return 0

        self._logger.info(
            "Processing image",
            log_context,
            operations=",".join(operation.label for operation in operations),
        )

        with timed_operation(
            "fetch", self._logger, self._metrics_collector, log_context
        ):
            source = self._file_system.fetch(self._event)

        with timed_operation(
            "transform",
            self._logger,
            self._metrics_collector,
            log_context,
            operations=len(operations),
        ):
            outcomes = self._batch_transformer(self._engine, source, operations)

        images, failures = self._apply_policy(outcomes, log_context)

        written = 0
        for image in images:
            with timed_operation(
                "write",
                self._logger,
                self._metrics_collector,
                log_context,
                key=image.key,
            ):
                self._file_system.write(image)
            written += 1

        if failures:
            raise PartialProcessingError(written, failures)

        self._logger.info("Processing completed", log_context, written=written)
        return written

    def _apply_policy(
        self, outcomes: Sequence[Any], log_context: LogContext
    ) -> Tuple[List[ImageValue], List[str]]:
        """Split outcomes into images to write and failed operation labels."""
        images: List[ImageValue] = []
        with BatchOperationContextManager(f"transforms of {self._event}") as batch:
            for outcome in outcomes:
                if outcome.error is None:
                    images.append(outcome.image)
                    continue
                batch.add_error(outcome.error, outcome.operation.label)
                if self._policy is CodecErrorPolicy.ABORT:
                    self._logger.error(
                        "Aborting before any write",
                        log_context,
                        failed=outcome.operation.label,
                    )
                    raise CodecError(
                        f"{outcome.operation.label}: {outcome.error}",
                        operation=outcome.operation.label,
                    )
        return images, batch.failed_items
