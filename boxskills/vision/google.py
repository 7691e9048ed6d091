"""Google Cloud Vision annotation service."""

import json
import logging
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import vision
from google.oauth2 import service_account

from boxskills.vision.images import fit_image_to_limit
from boxskills.vision.base import AnnotationService
from boxskills.vision.exceptions import (
    AnnotationError,
    AnnotationAuthError,
    AnnotationTimeoutError,
    AnnotationResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = ["LABEL_DETECTION", "DOCUMENT_TEXT_DETECTION"]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleVisionAnnotator(AnnotationService):
    """Annotation service backed by the Google Cloud Vision API.

    The Vision client is created on first use from service account
    credentials and reused for the lifetime of the instance. Every image
    is submitted in a single ``annotate_image`` call requesting the
    configured features, and the response is returned as plain JSON with
    the API's camelCase field names.

    Attributes:
        project_id: Google Cloud project used for quota and billing
        client_email: Service account email
        timeout: Request timeout in seconds
        max_image_bytes: Content above this size is downscaled first (0 disables)
    """

    def __init__(
        self,
        model_name: str = "google-cloud-vision",
        project_id: Optional[str] = None,
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        token_uri: str = DEFAULT_TOKEN_URI,
        features: Optional[List[str]] = None,
        timeout: float = 60,
        max_image_bytes: int = 0,
        jpeg_quality: int = 85,
        client: Optional[vision.ImageAnnotatorClient] = None
    ) -> None:
        """Initialize the Google Cloud Vision annotator.

        Args:
            model_name: Name identifier for the service
            project_id: Google Cloud project ID
            client_email: Service account email
            private_key: Service account PEM private key (already unescaped)
            token_uri: OAuth token endpoint for the service account
            features: Feature type names (defaults to label + document text)
            timeout: Request timeout in seconds
            max_image_bytes: Downscale content larger than this (0 disables)
            jpeg_quality: JPEG quality used when downscaling
            client: Pre-built Vision client (created lazily if not provided)

        Raises:
            AnnotationError: If a feature name is not a Vision feature type
        """
        super().__init__(model_name, features or DEFAULT_FEATURES)
        self.project_id = project_id
        self.client_email = client_email
        self._private_key = private_key
        self.token_uri = token_uri
        self.timeout = timeout
        self.max_image_bytes = max_image_bytes
        self.jpeg_quality = jpeg_quality
        self._client = client

        self._feature_types = []
        for name in self.features:
            try:
                self._feature_types.append(vision.Feature.Type[name])
            except KeyError as e:
                raise AnnotationError(f"Unknown Vision feature type: {name}") from e

    @property
    def client(self) -> vision.ImageAnnotatorClient:
        """Vision client, created on first access."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> vision.ImageAnnotatorClient:
        """Create a Vision client from the service account credentials.

        Raises:
            AnnotationAuthError: If credentials are missing or invalid
        """
        if not all([self.project_id, self.client_email, self._private_key]):
            raise AnnotationAuthError(
                "Google Cloud Vision requires project_id, client_email and private_key"
            )

        try:
            credentials = service_account.Credentials.from_service_account_info({
                "type": "service_account",
                "project_id": self.project_id,
                "client_email": self.client_email,
                "private_key": self._private_key,
                "token_uri": self.token_uri,
            })
        except (ValueError, KeyError) as e:
            raise AnnotationAuthError(
                f"Invalid Google service account credentials: {e}"
            ) from e

        logger.info(f"Created Vision client for project: {self.project_id}")
        return vision.ImageAnnotatorClient(
            credentials=credentials,
            client_options={"quota_project_id": self.project_id}
        )

    def request_annotations(self, content: bytes) -> Dict[str, Any]:
        """Submit image bytes to Vision and return the plain JSON response.

        Args:
            content: Raw image bytes

        Returns:
            Response dictionary, e.g. ``{"labelAnnotations": [...],
            "fullTextAnnotation": {"text": ...}}``

        Raises:
            AnnotationAuthError: If Vision rejects the credentials
            AnnotationTimeoutError: If the request exceeds its deadline
            AnnotationResponseError: If Vision reports an error for the image
            AnnotationError: For other API failures
        """
        content = fit_image_to_limit(content, self.max_image_bytes, self.jpeg_quality)

        request = {
            "image": {"content": content},
            "features": [{"type_": feature_type} for feature_type in self._feature_types],
        }

        try:
            response = self.client.annotate_image(request, timeout=self.timeout)
        except google_exceptions.DeadlineExceeded as e:
            raise AnnotationTimeoutError(
                f"Vision request timed out after {self.timeout}s: {e}"
            ) from e
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as e:
            raise AnnotationAuthError(f"Vision rejected credentials: {e}") from e
        except auth_exceptions.GoogleAuthError as e:
            raise AnnotationAuthError(f"Failed to authenticate with Google: {e}") from e
        except google_exceptions.GoogleAPIError as e:
            raise AnnotationError(f"Vision request failed: {e}") from e

        # Plain JSON copy; camelCase keys as in the REST API
        annotations = json.loads(vision.AnnotateImageResponse.to_json(response))

        error = annotations.get("error") or {}
        if error.get("message"):
            raise AnnotationResponseError(
                f"Vision returned an error ({error.get('code', 'unknown')}): "
                f"{error['message']}"
            )

        return annotations
