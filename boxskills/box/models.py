"""Data models for Box webhook payloads."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from boxskills.box.exceptions import WebhookEventError


@dataclass
class WebhookEvent:
    """A Box webhook notification reduced to what the pipeline needs.
    
    Attributes:
        user_id: ID of the user owning the source file
        file_id: ID of the file that triggered the webhook
        trigger: Webhook trigger name (e.g. FILE.UPLOADED), if present
        webhook_id: ID of the webhook that fired, if present
    """
    user_id: str
    file_id: str
    trigger: Optional[str] = None
    webhook_id: Optional[str] = None
    
    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "WebhookEvent":
        """Create WebhookEvent from a decoded webhook body.
        
        Args:
            data: Webhook body, ``{"source": {"owned_by": {"id": ...}, "id": ...}}``
            
        Returns:
            WebhookEvent instance
            
        Raises:
            WebhookEventError: If required fields are missing
        """
        if not isinstance(data, dict):
            raise WebhookEventError(
                f"Webhook body must be a JSON object, got {type(data).__name__}"
            )
        
        source = data.get("source")
        if not isinstance(source, dict):
            raise WebhookEventError("Webhook body is missing 'source'")
        
        owned_by = source.get("owned_by")
        user_id = owned_by.get("id") if isinstance(owned_by, dict) else None
        file_id = source.get("id")
        
        if user_id in (None, ""):
            raise WebhookEventError("Webhook body is missing 'source.owned_by.id'")
        if file_id in (None, ""):
            raise WebhookEventError("Webhook body is missing 'source.id'")
        
        webhook = data.get("webhook")
        return cls(
            user_id=str(user_id),
            file_id=str(file_id),
            trigger=data.get("trigger"),
            webhook_id=webhook.get("id") if isinstance(webhook, dict) else None,
        )
    
    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "WebhookEvent":
        """Create WebhookEvent from a serverless invocation event.
        
        The event carries the webhook body as a JSON string under ``body``.
        An already-decoded dict body is accepted too.
        
        Raises:
            WebhookEventError: If the body is absent, not valid JSON, or
                lacks the required fields
        """
        if not isinstance(event, dict) or "body" not in event:
            raise WebhookEventError("Event has no 'body'")
        
        body = event["body"]
        if isinstance(body, (str, bytes, bytearray)):
            try:
                body = json.loads(body)
            except ValueError as e:
                raise WebhookEventError(f"Event body is not valid JSON: {e}") from e
        
        return cls.from_payload(body)
    
    def __str__(self) -> str:
        """Return string representation of event."""
        return f"WebhookEvent(file={self.file_id}, user={self.user_id})"
