"""Map HTTP status codes from the parsing service onto the exception hierarchy."""

from __future__ import annotations

import contextlib

import httpx

from hrxml.errors.exceptions import HRXMLError, TerminalError, TransientError

_TERMINAL_TYPES: dict[int, str] = {
    400: "bad_input",
    401: "auth_failure",
    403: "forbidden",
    404: "not_found",
    413: "document_too_large",
    415: "unsupported_document",
    422: "unparseable_document",
}


def classify_http_status(
    status: int,
    message: str = "",
    retry_after: float | None = None,
) -> HRXMLError:
    """Convert a non-2xx status code to our exception hierarchy."""
    message = message or f"HTTP {status}"

    if status == 429:
        return TransientError(
            message,
            error_type="rate_limit",
            http_status=status,
            retry_after=retry_after,
        )
    if status in (408, 504):
        return TransientError(message, error_type="timeout", http_status=status)
    if status >= 500:
        return TransientError(message, error_type="server_error", http_status=status)
    if status in _TERMINAL_TYPES:
        return TerminalError(message, error_type=_TERMINAL_TYPES[status], http_status=status)
    return TerminalError(message, error_type="unknown", http_status=status)


def classify_response(response: httpx.Response) -> HRXMLError:
    """Classify a failed httpx response, honouring its Retry-After header."""
    retry_after = None
    retry_after_str = response.headers.get("retry-after")
    if retry_after_str:
        with contextlib.suppress(ValueError):
            retry_after = float(retry_after_str)

    reason = response.reason_phrase or "error"
    message = f"Parsing service returned {response.status_code} {reason}"
    return classify_http_status(response.status_code, message, retry_after=retry_after)
