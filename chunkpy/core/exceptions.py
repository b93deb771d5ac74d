"""
Custom exceptions for chunked upload operations.

Only TransportError is retried by the engine; every other class is
surfaced to the caller.
"""
from typing import Optional


class UploadError(Exception):
    """Base exception for all upload-related errors."""
    
    def __init__(self, message: str, action: Optional[str] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            action: Name of the server action involved (if any)
        """
        self.action = action
        super().__init__(message)


class InvalidInputError(UploadError):
    """Raised when the file or configuration cannot be uploaded."""
    pass


class UploadStateError(UploadError):
    """Raised when an engine operation is not valid in its current phase."""
    pass


class TransportError(UploadError):
    """Connection error or missing response. Transient, retried."""
    pass


class ApplicationError(UploadError):
    """Exception raised when the server rejects a request."""
    
    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        status: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            action: Name of the server action that failed
            status: HTTP status code of the response
        """
        self.status = status
        super().__init__(message, action)


class RequestFailedError(ApplicationError):
    """HTTP error status without a structured error payload."""
    pass


class MalformedResponseError(UploadError):
    """Exception raised when a successful response body cannot be parsed."""
    pass


class SizeMismatchError(UploadError):
    """Exception raised when the server confirms a different total size."""
    
    def __init__(self, expected: int, confirmed: int) -> None:
        self.expected = expected
        self.confirmed = confirmed
        super().__init__(
            f"Uploaded size {confirmed} does not match file size {expected}",
            'close'
        )
