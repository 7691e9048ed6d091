"""Abstract base class for image annotation services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import time

from boxskills.vision.exceptions import AnnotationError, AnnotationImageError

logger = logging.getLogger(__name__)


@dataclass
class AnnotationResult:
    """Annotations returned for one image.

    Attributes:
        annotations: Plain JSON response (camelCase keys, e.g.
            ``labelAnnotations`` and ``fullTextAnnotation``)
        model_used: Name of the service that produced the annotations
        processing_time: Time taken by the request in seconds
    """
    annotations: Dict[str, Any] = field(default_factory=dict)
    model_used: str = ""
    processing_time: float = 0.0

    @property
    def label_annotations(self) -> List[Dict[str, Any]]:
        """Label annotations in response order (empty if none)."""
        return self.annotations.get("labelAnnotations") or []

    @property
    def full_text_annotation(self) -> Optional[Dict[str, Any]]:
        """Full text annotation object, if the service found any text."""
        return self.annotations.get("fullTextAnnotation")


class AnnotationService(ABC):
    """Abstract base class for image annotation services.

    Subclasses implement ``request_annotations`` against a concrete API;
    ``annotate`` wraps it with input checks, timing and logging.

    Attributes:
        model_name: Name identifier for the service
        features: Annotation feature types requested for every image
    """

    def __init__(self, model_name: str, features: Optional[List[str]] = None) -> None:
        """Initialize the annotation service.

        Args:
            model_name: Name identifier for the service
            features: Feature type names to request
        """
        self.model_name = model_name
        self.features = list(features or [])
        logger.info(f"Initialized {self.__class__.__name__} with features: {self.features}")

    @abstractmethod
    def request_annotations(self, content: bytes) -> Dict[str, Any]:
        """Submit image bytes and return the plain JSON response.

        Args:
            content: Raw image bytes

        Returns:
            Response as a dictionary of plain JSON values

        Raises:
            AnnotationError: If the request fails
        """
        pass

    def annotate(self, content: bytes) -> AnnotationResult:
        """Annotate an image.

        Args:
            content: Raw image bytes

        Returns:
            AnnotationResult with the service response

        Raises:
            AnnotationImageError: If content is empty
            AnnotationError: If the request fails
        """
        if not content:
            raise AnnotationImageError("Cannot annotate empty image content")

        start_time = time.time()
        logger.debug(f"Requesting annotations for {len(content)} bytes")

        try:
            annotations = self.request_annotations(content)
        except AnnotationError as e:
            logger.error(f"Annotation request failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected annotation failure: {e}", exc_info=True)
            raise AnnotationError(f"Annotation request failed: {e}") from e

        processing_time = time.time() - start_time
        logger.info(
            f"Received annotations from {self.model_name} in {processing_time:.2f}s "
            f"({len(annotations.get('labelAnnotations') or [])} labels, "
            f"text={'yes' if annotations.get('fullTextAnnotation') else 'no'})"
        )

        return AnnotationResult(
            annotations=annotations,
            model_used=self.model_name,
            processing_time=processing_time
        )
