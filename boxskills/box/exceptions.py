"""Custom exceptions for Box API and webhook operations."""


class BoxError(Exception):
    """Base exception for Box-related errors."""
    pass


class BoxRequestError(BoxError):
    """Exception raised for Box API errors.
    
    Attributes:
        message: Error message
        status_code: HTTP status code
        response: Full response data (if available)
    """
    
    def __init__(self, message: str, status_code: int = None, response: dict = None):
        """Initialize Box API error.
        
        Args:
            message: Error message
            status_code: HTTP status code
            response: Full response data
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response
    
    def __str__(self) -> str:
        """Return string representation of error."""
        if self.status_code:
            return f"Box API Error ({self.status_code}): {self.message}"
        return f"Box API Error: {self.message}"


class BoxAuthError(BoxError):
    """Exception raised for authentication errors."""
    pass


class BoxNotFoundError(BoxRequestError):
    """Exception raised when a file or metadata instance is not found (404)."""
    pass


class BoxDownloadError(BoxRequestError):
    """Exception raised when file content cannot be streamed."""
    pass


class BoxFileTooLargeError(BoxDownloadError):
    """Exception raised when a file exceeds the configured download ceiling."""
    
    def __init__(self, message: str, size: int = None, limit: int = None):
        """Initialize file size error.
        
        Args:
            message: Error message
            size: Number of bytes read before aborting
            limit: Configured maximum size in bytes
        """
        super().__init__(message, status_code=413)
        self.size = size
        self.limit = limit


class BoxMetadataConflictError(BoxRequestError):
    """Exception raised when metadata already exists for a template (409)."""
    pass


class WebhookEventError(BoxError):
    """Exception raised for malformed webhook trigger payloads."""
    pass
