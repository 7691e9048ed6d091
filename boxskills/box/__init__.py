"""Box API integration for boxskills."""

from boxskills.box.client import BoxClient
from boxskills.box.models import WebhookEvent
from boxskills.box.exceptions import (
    BoxError,
    BoxRequestError,
    BoxAuthError,
    BoxNotFoundError,
    BoxDownloadError,
    BoxFileTooLargeError,
    BoxMetadataConflictError,
    WebhookEventError,
)

__all__ = [
    "BoxClient",
    "WebhookEvent",
    "BoxError",
    "BoxRequestError",
    "BoxAuthError",
    "BoxNotFoundError",
    "BoxDownloadError",
    "BoxFileTooLargeError",
    "BoxMetadataConflictError",
    "WebhookEventError",
]
