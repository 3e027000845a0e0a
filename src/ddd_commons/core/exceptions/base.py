"""Root exception of ddd-commons.

Repository, unit of work, settings and log stream failures all derive from
DDDCommonsError, so callers can catch the library's errors in one clause and
still read a stable code and structured details from them.
"""

from typing import Any, Dict, Optional


class DDDCommonsError(Exception):
    """Error raised by ddd-commons.

    ``error_code`` defaults to the class name. ``details`` holds the values
    that explain the failure, such as the repository names of an
    incompatible pair or the pydantic errors of invalid settings.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = details or {}


def create_error_response(exception: DDDCommonsError) -> Dict[str, Any]:
    """Serialize an error for logs or API payloads.

    Returns:
        ``{"error": {"code", "message", "details", "type"}}``
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": type(exception).__name__,
        }
    }
