"""
Error taxonomy for Decade Restyle
Maps google-genai failures onto a fixed set of error kinds at the client edge
"""

import re
from enum import Enum
from typing import Optional

from google.genai import errors as genai_errors


class DecadeRestyleError(Exception):
    """Base class for every failure surfaced by the orchestration layer"""

    kind = "DecadeRestyleError"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputFormat(DecadeRestyleError):
    kind = "InvalidInputFormat"
    http_status = 400


class MissingCredential(DecadeRestyleError):
    kind = "MissingCredential"
    http_status = 401


class RemoteCallError(DecadeRestyleError):
    """A remote call failed; carries the structured code/status when the SDK provided one"""

    kind = "RemoteCallError"
    http_status = 502

    def __init__(self, message: str, code: Optional[int] = None, status: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.status = status


class TerminalRemoteError(RemoteCallError):
    kind = "TerminalRemoteError"


class ExhaustedRetries(RemoteCallError):
    kind = "ExhaustedRetries"
    http_status = 503


class UnclassifiedRemoteError(RemoteCallError):
    kind = "UnclassifiedRemoteError"


class EmptyResponse(DecadeRestyleError):
    kind = "EmptyResponse"
    http_status = 502


class PolicyRejectedError(DecadeRestyleError):
    kind = "PolicyRejected"
    http_status = 422


class UnexpectedTextOnly(DecadeRestyleError):
    kind = "UnexpectedTextOnly"
    http_status = 422


class ErrorClass(Enum):
    TERMINAL = "terminal"
    TRANSIENT = "transient"
    UNCLASSIFIED = "unclassified"


TERMINAL_CODES = {401, 403, 404, 429}

TERMINAL_STATUSES = {
    "RESOURCE_EXHAUSTED",
    "PERMISSION_DENIED",
    "UNAUTHENTICATED",
    "NOT_FOUND",
}

TRANSIENT_STATUSES = {"INTERNAL", "UNAVAILABLE"}

# Only consulted when the SDK gives us no usable code/status
TERMINAL_MARKERS = (
    "quota",
    "billing",
    "api key not valid",
    "permission denied",
    "unauthorized",
    "not found",
)

TRANSIENT_MARKERS = ("internal", "unavailable", "overloaded")

# A bare 5xx status token; "15000ms" or "port 5000" do not count
SERVER_STATUS_TOKEN = re.compile(r"\b5\d\d\b")


def _matches_marker(text: str, markers) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def classify_remote_error(error: BaseException) -> ErrorClass:
    """
    Classify a failure raised by the remote call

    Structured fields of google.genai.errors.APIError are authoritative.
    Message heuristics are used only for the billing case (reported as a
    plain 400 by the API) and for exceptions that carry no code at all.

    Args:
        error: Exception raised while calling generate_content

    Returns:
        ErrorClass deciding whether the executor retries, aborts, or propagates
    """
    if isinstance(error, genai_errors.APIError):
        code = error.code if isinstance(error.code, int) else None
        status = (error.status or "").upper()

        if code in TERMINAL_CODES or status in TERMINAL_STATUSES:
            return ErrorClass.TERMINAL

        if (code is not None and 500 <= code < 600) or status in TRANSIENT_STATUSES:
            return ErrorClass.TRANSIENT

        if status == "FAILED_PRECONDITION" or _matches_marker(error.message or "", TERMINAL_MARKERS):
            return ErrorClass.TERMINAL

        if code is not None or status:
            return ErrorClass.UNCLASSIFIED

    text = str(error)
    if _matches_marker(text, TERMINAL_MARKERS):
        return ErrorClass.TERMINAL
    if SERVER_STATUS_TOKEN.search(text) or _matches_marker(text, TRANSIENT_MARKERS):
        return ErrorClass.TRANSIENT
    return ErrorClass.UNCLASSIFIED


def describe_remote_error(error: BaseException) -> str:
    """Short one-line description used in log entries and error messages"""
    if isinstance(error, genai_errors.APIError):
        return f"{error.code} {error.status}: {error.message or error.details}"
    return f"{type(error).__name__}: {error}"


def remote_error_fields(error: BaseException):
    """Return (code, status) for SDK errors, (None, None) otherwise"""
    if isinstance(error, genai_errors.APIError):
        return error.code, error.status
    return None, None
