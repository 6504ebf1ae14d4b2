"""
Exceptions for NWPS operations.
"""

from typing import Optional


class NWPSError(Exception):
    """Base exception for NWPS-related errors."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class NWPSValidationError(NWPSError, ValueError):
    """Invalid parameter, rejected before any request is made."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter


class NWPSConnectionError(NWPSError):
    """Error connecting to the NWPS API (DNS, TLS, timeout)."""

    pass


class NWPSServerError(NWPSError):
    """NWPS API returned a server error after retries were exhausted."""

    pass


class NWPSQueryError(NWPSError):
    """Error in NWPS request or response."""

    pass


class NWPSNotFoundError(NWPSQueryError):
    """Requested gauge, reach or product does not exist."""

    pass


class NWPSBadRequestError(NWPSQueryError):
    """NWPS API rejected the request parameters."""

    pass
