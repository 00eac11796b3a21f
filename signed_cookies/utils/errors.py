"""
Error Handling Utilities
Exception types shared by the signer, the cookie codec and the host adapter.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for programmatic handling."""

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    SIGNER_NOT_CONFIGURED = "SIGNER_NOT_CONFIGURED"

    # Serialization errors
    INVALID_COOKIE_NAME = "INVALID_COOKIE_NAME"
    INVALID_COOKIE_VALUE = "INVALID_COOKIE_VALUE"
    INVALID_COOKIE_OPTION = "INVALID_COOKIE_OPTION"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Standardized error response format."""

    model_config = ConfigDict(use_enum_values=True)

    error: str
    code: ErrorCode
    details: Optional[str] = None
    suggestion: Optional[str] = None


class BaseCookieException(Exception):
    """Base exception for all cookie subsystem errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        status_code: int = 500,
        details: Optional[str] = None,
        suggestion: Optional[str] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for HTTP response."""
        return ErrorResponse(
            error=self.message,
            code=self.code,
            details=self.details,
            suggestion=self.suggestion,
        ).model_dump()


class CookieConfigurationError(BaseCookieException):
    """Raised when a signer or codec is built from unusable settings."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.CONFIGURATION_ERROR,
            details=details,
            suggestion="Check COOKIE_SECRET and COOKIE_ALGORITHM."
        )


class SignerNotConfiguredError(BaseCookieException):
    """Raised when signing is requested but no secret was configured."""

    def __init__(self):
        super().__init__(
            "Cookie signing is not configured.",
            ErrorCode.SIGNER_NOT_CONFIGURED,
            suggestion="Provide a secret or a signer object."
        )


class InvalidCookieNameError(BaseCookieException):
    def __init__(self, name: str, status_code: int = 500):
        super().__init__(
            "Cookie name is invalid.",
            ErrorCode.INVALID_COOKIE_NAME,
            status_code=status_code,
            details=f"name={name!r}",
            suggestion="Cookie names may only contain RFC 7230 token characters."
        )


class InvalidCookieValueError(BaseCookieException):
    def __init__(self, name: str):
        super().__init__(
            "Cookie value is invalid.",
            ErrorCode.INVALID_COOKIE_VALUE,
            details=f"encoded value of {name!r} contains forbidden characters",
            suggestion="Use the default encoder or make the custom encoder header-safe."
        )


class InvalidCookieOptionError(BaseCookieException):
    def __init__(self, option: str, details: Optional[str] = None):
        super().__init__(
            f"Cookie option '{option}' is invalid.",
            ErrorCode.INVALID_COOKIE_OPTION,
            details=details
        )
        self.option = option


class CookieSizeWarning(UserWarning):
    """A serialized cookie is larger than the configured safe-size limit."""


def log_error(
    error: Exception,
    context: str,
    additional_data: Optional[Dict[str, Any]] = None
):
    """
    Log error with consistent format and context.

    Args:
        error: The exception that occurred
        context: Description of what was being done when error occurred
        additional_data: Optional additional data to log
    """
    log_data = {
        "context": context,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if additional_data:
        log_data.update(additional_data)

    logger.error(f"Error in {context}", extra=log_data)
