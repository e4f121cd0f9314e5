"""
Typed exceptions for SWAPSIM.

Every error carries an ErrorCode so callers can tell a network outage
("check your connection") apart from an upstream that answered but had
no route for the pair.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Canonical error codes."""
    # Rejected before any network call
    INVALID_INPUT = "INVALID_INPUT"

    # Upstream could not be reached (connect error, timeout)
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"

    # Upstream answered with a non-success status
    UPSTREAM_REJECTED = "UPSTREAM_REJECTED"

    # Upstream answered but required fields are missing
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"

    # Live transaction probe failed; always recovered with the heuristic
    PROBE_UNAVAILABLE = "PROBE_UNAVAILABLE"

    UNKNOWN = "UNKNOWN"


class SwapSimError(Exception):
    """Base exception for SWAPSIM."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str = "",
        code: Optional[ErrorCode] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class InvalidInputError(SwapSimError):
    """Missing mint, non-positive amount or out-of-range parameter."""
    code = ErrorCode.INVALID_INPUT


class UpstreamUnavailableError(SwapSimError):
    """Network or timeout failure reaching an upstream service."""
    code = ErrorCode.UPSTREAM_UNAVAILABLE


class UpstreamRejectedError(SwapSimError):
    """Upstream returned a non-success status."""
    code = ErrorCode.UPSTREAM_REJECTED

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        details: Optional[dict] = None,
    ):
        details = dict(details or {})
        details.update({"status_code": status_code, "body": body})
        super().__init__(message, details=details)
        self.status_code = status_code
        self.body = body


class MalformedResponseError(SwapSimError):
    """Upstream response is missing a required field."""
    code = ErrorCode.MALFORMED_RESPONSE


class ProbeUnavailableError(SwapSimError):
    """Transaction probe could not build, decode or dry-run the swap."""
    code = ErrorCode.PROBE_UNAVAILABLE
