"""AWS Lambda entry point for S3 put notifications."""

from typing import Any, Dict, Mapping, Optional

from .core import get_logger, load_config
from .core.factories import ProcessingPipelineFactory, RuntimeSettings
from .core.models import StorageEvent
from .core.protocols import FileSystemProtocol


def handle_notification(
    payload: Mapping[str, Any],
    settings: RuntimeSettings,
    file_system: Optional[FileSystemProtocol] = None,
) -> Dict[str, int]:
    """Run the configured operations for every record of a notification."""
    logger = get_logger("handler")
    config = load_config(settings.config_path)
    events = StorageEvent.from_notification(payload)
    if file_system is None:
        file_system = ProcessingPipelineFactory.create_file_system()

    processed = 0
    for event in events:
        processor = ProcessingPipelineFactory.create_processor(
            event,
            file_system=file_system,
            processor=settings.processor,
            codec_error_policy=settings.codec_error_policy,
        )
        processed += processor.run(config)
        logger.info(f"Finished {event}")

    return {"processed": processed, "records": len(events)}


def handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, int]:
    """Lambda handler; settings come from the environment."""
    return handle_notification(event, RuntimeSettings.from_env())
