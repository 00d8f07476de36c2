"""Base exceptions for neo-deploy.

This module defines the root of the neo-deploy exception hierarchy. Every
exception carries an error code and a details mapping so that the outer
HTTP layer can render a consistent error envelope.
"""

from typing import Any, Dict, Optional


class NeoDeployError(Exception):
    """Base exception for all neo-deploy errors.

    All exceptions raised by the control plane inherit from this class and
    carry structured error information for debugging and API responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as get_mapped_status_code
    return get_mapped_status_code(exception)


def create_error_response(exception: NeoDeployError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-deploy exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
