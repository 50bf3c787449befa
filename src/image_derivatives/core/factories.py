"""Factory classes for creating configured service instances."""

import logging
import os
from typing import Any, Mapping, Optional

import boto3

from .exceptions import ConfigurationError
from .models import StorageEvent
from .observability import MetricsCollector, StructuredLogger
from .protocols import FileSystemProtocol, LoggerProtocol, S3ClientProtocol
from .services import CodecErrorPolicy, ImageProcessor, S3FileSystem, TransformEngine


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: int = logging.INFO) -> LoggerProtocol:
        """Create a configured structured logger."""
        return StructuredLogger(name, level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class ProcessingPipelineFactory:
    """Factory for creating image processors bound to one event."""

    @staticmethod
    def create_file_system(
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
    ) -> S3FileSystem:
        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()
        if logger is None:
            logger = LoggerFactory.create_logger("storage")
        return S3FileSystem(s3_client, logger)

    @staticmethod
    def create_processor(
        event: StorageEvent,
        file_system: Optional[FileSystemProtocol] = None,
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        processor: str = "serial",
        codec_error_policy: str = CodecErrorPolicy.ABORT.value,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ImageProcessor:
        """Create a fully configured image processor."""
        from ..processors import get_batch_transformer

        if logger is None:
            logger = LoggerFactory.create_logger("image_processor")
        if file_system is None:
            file_system = ProcessingPipelineFactory.create_file_system(s3_client, logger)

        return ImageProcessor(
            file_system=file_system,
            event=event,
            logger=logger,
            batch_transformer=get_batch_transformer(processor),
            engine=TransformEngine(),
            codec_error_policy=codec_error_policy,
            metrics_collector=metrics_collector,
        )


class RuntimeSettings:
    """Wiring settings read from the environment."""

    def __init__(
        self,
        config_path: str = "config.json",
        processor: str = "serial",
        codec_error_policy: str = CodecErrorPolicy.ABORT.value,
    ):
        from ..processors import PROCESSORS

        if processor not in PROCESSORS:
            raise ConfigurationError(
                f"Unknown processor {processor!r}, expected one of: {', '.join(PROCESSORS)}"
            )
        self.config_path = config_path
        self.processor = processor
        self.codec_error_policy = CodecErrorPolicy.parse(codec_error_policy).value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeSettings":
        """
        Read settings from environment variables.

        Environment Variables:
            IMAGE_CONFIG_PATH: JSON configuration file (default config.json)
            PROCESSING_STRATEGY: serial, multithread, multiprocess or asyncio
            CODEC_ERROR_POLICY: abort or continue
        """
        environ = os.environ if environ is None else environ
        return cls(
            config_path=environ.get("IMAGE_CONFIG_PATH", "config.json"),
            processor=environ.get("PROCESSING_STRATEGY", "serial").lower(),
            codec_error_policy=environ.get("CODEC_ERROR_POLICY", "abort").lower(),
        )
