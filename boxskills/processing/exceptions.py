"""Custom exceptions for the metadata pipeline."""


class ProcessingError(Exception):
    """Base exception for pipeline errors."""
    pass


class MetadataWriteError(ProcessingError):
    """Raised when one or more metadata writes failed.
    
    Attributes:
        results: MetadataWriteResult for every attempted write, including
            the ones that succeeded
    """
    
    def __init__(self, message: str, results: list = None):
        super().__init__(message)
        self.results = results or []
    
    @property
    def failed_templates(self) -> list:
        """Template keys whose write failed."""
        return [r.template_key for r in self.results if not r.success and not r.skipped]
