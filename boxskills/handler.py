"""Serverless entry point for Box webhook events.

Deploy ``boxskills.handler.handler`` as the function handler. The event
carries the Box webhook payload as a JSON string under ``body``::

    {"body": "{\"source\": {\"owned_by\": {\"id\": \"111\"}, \"id\": \"222\"}}"}

Configuration and the annotation service are created on the first
invocation and reused while the process stays warm; a Box client is built
per invocation for the file's owner.
"""

import json
import logging
from typing import Any, Dict, Optional

from boxskills.box import BoxClient, WebhookEvent
from boxskills.config import ConfigManager
from boxskills.logging_config import setup_logging
from boxskills.processing import ProcessingResult, SkillProcessor

logger = logging.getLogger(__name__)

_processor: Optional[SkillProcessor] = None


def get_processor() -> SkillProcessor:
    """Return the process-wide SkillProcessor, creating it on first use.

    Raises:
        ConfigError: If required configuration is missing
    """
    global _processor

    if _processor is None:
        config = ConfigManager.load()
        setup_logging(
            config.get("logging.level", "INFO"),
            config.get("logging.format"),
            log_file=config.get("logging.file") or None
        )
        _processor = SkillProcessor(config)

    return _processor


def parse_webhook_event(event: Dict[str, Any]) -> WebhookEvent:
    """Extract the user and file IDs from an invocation event.

    Raises:
        WebhookEventError: If the body is missing, malformed or incomplete
    """
    webhook = WebhookEvent.from_event(event)
    logger.info(
        f"Received webhook for file {webhook.file_id} owned by user {webhook.user_id}"
        + (f" ({webhook.trigger})" if webhook.trigger else "")
    )
    return webhook


def build_response(result: ProcessingResult) -> Dict[str, Any]:
    """Shape a processing result as an HTTP-style response."""
    return {
        "statusCode": 200,
        "body": json.dumps(result.records()),
    }


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Annotate the file named in a Box webhook and write its metadata.

    Args:
        event: Invocation event with the webhook payload under ``body``
        context: Runtime context (unused)

    Returns:
        ``{"statusCode": 200, "body": <json>}`` where the body maps each
        metadata template key to the record written

    Raises:
        WebhookEventError: If the event is malformed (before any network call)
        ConfigError: If configuration is incomplete
        BoxError: If the file cannot be read
        AnnotationError: If annotation fails
        MetadataWriteError: If either metadata write fails
    """
    webhook = parse_webhook_event(event)
    processor = get_processor()

    try:
        client = BoxClient.for_user(processor.config, webhook.user_id)
        result = processor.process_file(client, webhook.file_id, user_id=webhook.user_id)
    except Exception as e:
        logger.error(f"Failed to process file {webhook.file_id}: {e}", exc_info=True)
        raise

    return build_response(result)
