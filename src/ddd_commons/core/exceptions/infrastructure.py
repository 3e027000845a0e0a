"""Infrastructure-specific exceptions for ddd-commons.

This module defines exceptions related to settings validation and to the
file streams used by the logging feature.
"""

from .base import DDDCommonsError
from .domain import ConfigurationError


# Validation Errors
class ValidationError(DDDCommonsError):
    """Raised when input validation fails."""
    pass


class InvalidSettingsError(ConfigurationError, ValidationError):
    """Raised when service settings fail validation."""
    pass


# Log Stream Errors
class LogStreamError(DDDCommonsError):
    """Raised when a log stream fails to open, write or close."""
    pass
