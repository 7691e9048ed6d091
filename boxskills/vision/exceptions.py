"""Custom exceptions for image annotation operations."""


class AnnotationError(Exception):
    """Base exception for annotation service errors."""
    pass


class AnnotationAuthError(AnnotationError):
    """Raised when the annotation service rejects the configured credentials."""
    pass


class AnnotationTimeoutError(AnnotationError):
    """Raised when an annotation request times out."""
    pass


class AnnotationResponseError(AnnotationError):
    """Raised when the annotation service returns an error or unexpected response."""
    pass


class AnnotationImageError(AnnotationError):
    """Raised when image content cannot be submitted (empty, undecodable, etc.)."""
    pass
