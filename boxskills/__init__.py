"""boxskills - Google Cloud Vision keywords and transcripts for Box files.

A webhook-triggered function that annotates newly uploaded Box images with
Google Cloud Vision and writes the detected labels and text back to the
file as global metadata.
"""

from boxskills._version import __version__, __version_info__
from boxskills.config import ConfigManager
from boxskills.box import BoxClient, WebhookEvent
from boxskills.processing import SkillProcessor

__license__ = "MIT"
__all__ = [
    "__version__",
    "__version_info__",
    "ConfigManager",
    "BoxClient",
    "WebhookEvent",
    "SkillProcessor",
]
