"""
Custom exceptions for pinme operations.

Every error raised by the library derives from PinmeException so the CLI
can report it without a traceback.
"""
from pathlib import Path
from typing import Optional, Union


class PinmeException(Exception):
    """Base exception for all pinme errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigError(PinmeException):
    """Raised when environment configuration cannot be parsed."""
    pass


class PinmeIOError(PinmeException):
    """Raised when a local path cannot be read or written."""
    pass


class SizeLimitExceeded(PinmeException):
    """Raised when a file or directory is larger than the configured limit."""
    
    def __init__(
        self,
        message: str,
        size: int,
        limit: int,
        path: Optional[Union[str, Path]] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            size: Observed size in bytes
            limit: Configured limit in bytes
            path: Offending file or directory
        """
        self.size = size
        self.limit = limit
        self.path = path
        super().__init__(message)


class InvalidResponse(PinmeException):
    """Raised when the storage service returns a malformed payload."""
    pass


class HashNotFound(PinmeException):
    """Raised when a well-formed response lacks the expected entry."""
    
    def __init__(self, message: str, expected_name: Optional[str] = None) -> None:
        self.expected_name = expected_name
        super().__init__(message)


class RemoteError(PinmeException):
    """Raised when the storage service reports an application error."""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        status: Optional[int] = None,
        hint: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Application code from the response body
            status: HTTP status code
            hint: Human-readable suggestion for the user
        """
        self.status = status
        self.hint = hint
        super().__init__(message, error_code)


class NetworkError(PinmeException):
    """Raised when no response was received from the storage service."""
    
    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        self.hint = hint
        super().__init__(message)


class InvalidInput(PinmeException):
    """Raised when a removal target matches no recognized format."""
    pass
