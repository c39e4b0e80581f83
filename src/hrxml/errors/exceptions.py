"""Custom exception hierarchy for hrxml."""

from __future__ import annotations


class HRXMLError(Exception):
    """Base exception for all hrxml errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class TransientError(HRXMLError):
    """Transient error — the service may succeed if asked again later.

    Examples: 429 rate limit, 500/502/503 server error, timeout.
    """

    def __init__(
        self,
        message: str = "",
        error_type: str = "server_error",
        http_status: int | None = None,
        retry_after: float | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.http_status = http_status
        self.retry_after = retry_after
        self.original = original


class GatewayTimeoutError(TransientError):
    """A request did not finish in time.

    Raised for I/O timeouts and for requests exceeding max_request_time,
    which usually means the transport was not poked often enough.
    """

    def __init__(
        self,
        message: str = "Gateway timeout",
        original: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            error_type="timeout",
            http_status=504,
            original=original,
        )


class TerminalError(HRXMLError):
    """Terminal error — asking again with the same input will not help.

    Examples: 401 auth failure, 404 unknown endpoint, 415 unsupported document.
    """

    def __init__(
        self,
        message: str = "",
        error_type: str = "auth_failure",
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.http_status = http_status


class MalformedResponseError(HRXMLError):
    """The service answered, but the body is not a usable HR-XML document."""

    _MAX_BODY_CHARS = 500

    def __init__(self, message: str = "", body: str | None = None) -> None:
        super().__init__(message)
        if body is not None and len(body) > self._MAX_BODY_CHARS:
            body = body[: self._MAX_BODY_CHARS] + "..."
        self.body = body


class TransportClosedError(HRXMLError):
    """Operation attempted on a transport that has been closed."""
