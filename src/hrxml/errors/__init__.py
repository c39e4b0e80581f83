"""Error handling — exceptions and HTTP status classification."""

from hrxml.errors.classify import classify_http_status, classify_response
from hrxml.errors.exceptions import (
    GatewayTimeoutError,
    HRXMLError,
    MalformedResponseError,
    TerminalError,
    TransientError,
    TransportClosedError,
)

__all__ = [
    "HRXMLError",
    "TransientError",
    "GatewayTimeoutError",
    "TerminalError",
    "MalformedResponseError",
    "TransportClosedError",
    "classify_http_status",
    "classify_response",
]
