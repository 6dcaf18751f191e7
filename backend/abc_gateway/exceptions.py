"""
Gateway Exception Hierarchy

Error codes shared by every pipeline stage. Codes double as the
response codes reported to callers when a stage fails locally.
"""
from typing import Optional, Dict, Any


# Reserved response codes for locally produced failures
PARSE_FAILURE_CODE = "9997"
NETWORK_ERROR_CODE = "9998"
SYSTEM_ERROR_CODE = "9999"
PARAM_ERROR_CODE = "PARAM_ERROR"
PREPAY_ID_ERROR_CODE = "PREPAY_ID_ERROR"
CONFIG_ERROR_CODE = "CONFIG_ERROR"


class GatewayError(Exception):
    """
    Base exception for all payment gateway errors.

    Every subclass carries a machine-readable error code so the
    orchestrator can turn it into a result value without inspecting
    the exception type.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(GatewayError):
    """
    Payment intent is missing required fields.

    Examples:
    - Blank order number
    - Blank order amount
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(PARAM_ERROR_CODE, message, details)


class SigningError(GatewayError):
    """
    Request could not be signed.

    Examples:
    - Merchant certificate unreadable
    - Signing transform raised
    - No certificate configured outside insecure mode
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(SYSTEM_ERROR_CODE, message, details)


class TransportError(GatewayError):
    """
    Bank endpoint could not be reached or answered with an HTTP error.

    Safe to retry by resubmitting the same order number after an
    order query confirms the order is unknown to the bank.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(NETWORK_ERROR_CODE, message, details)


class ParseError(GatewayError):
    """Bank reply is not a structured object."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(PARSE_FAILURE_CODE, message, details)


class PrepayTokenMissing(GatewayError):
    """Neither a prepay_id nor a transaction id came back for a wallet order."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(PREPAY_ID_ERROR_CODE, message, details)


class ConfigurationError(GatewayError):
    """Required secret is unset and insecure defaults are disabled."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(CONFIG_ERROR_CODE, message, details)
