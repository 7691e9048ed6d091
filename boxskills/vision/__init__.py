"""Image annotation integration for boxskills."""

from boxskills.vision.base import AnnotationService, AnnotationResult
from boxskills.vision.google import GoogleVisionAnnotator
from boxskills.vision.factory import VisionServiceFactory
from boxskills.vision.exceptions import (
    AnnotationError,
    AnnotationAuthError,
    AnnotationTimeoutError,
    AnnotationResponseError,
    AnnotationImageError,
)

__all__ = [
    "AnnotationService",
    "AnnotationResult",
    "GoogleVisionAnnotator",
    "VisionServiceFactory",
    "AnnotationError",
    "AnnotationAuthError",
    "AnnotationTimeoutError",
    "AnnotationResponseError",
    "AnnotationImageError",
]
