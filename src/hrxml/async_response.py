"""Async resume-parsing handle returned by ResumeParser.parse_resume_async().

Typical use::

    pending = parser.parse_resume_async({"alice": "alice.pdf", "bob": "bob.docx"})
    ... do something else ...
    pending.poke()  # keep data flowing
    ... do more ...
    for resume, resource_id in pending:
        print(resource_id, resume.name)

Concurrency here means the transport multiplexes sockets from the calling
thread; there is no event loop running behind your back, no threads and no
forks. Nothing moves while your code is busy elsewhere, so call poke() (or
has_response(), is_complete(), await_response(), which poke as a side
effect) every few seconds at most. Otherwise responses sit in socket
buffers until the service gives up, which shows up later as a
GatewayTimeoutError.

No exceptions are caught here. Transport and decoding failures propagate
from await_response(), so guard against them in your own code.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def poke(self) -> None: ...

    def to_return_count(self) -> int: ...

    def total_count(self) -> int: ...

    def wait_for_next_response(self) -> tuple[Any, Hashable] | None: ...


class Decoder(Protocol):
    def decode(self, response: Any) -> Any: ...


class AsyncResponse:
    """Tracks in-flight parse requests and hands back (result, resource_id) pairs.

    Args:
        transport: Shared non-blocking user agent; owned by the caller.
        decoder: Turns a raw response into a parse result.
        task_map: Transport request id -> caller resource id. Requests with
            no entry resolve to their transport id.
    """

    def __init__(
        self,
        transport: Transport,
        decoder: Decoder,
        task_map: dict[Hashable, Hashable] | None = None,
    ) -> None:
        self._transport = transport
        self._decoder = decoder
        self._task_map: dict[Hashable, Hashable] = dict(task_map or {})
        self._last_await_id: Hashable | None = None

    @property
    def task_map(self) -> dict[Hashable, Hashable]:
        """Copy of the ids still awaiting collection."""
        return dict(self._task_map)

    @property
    def last_await_id(self) -> Hashable | None:
        """Resource id returned by the most recent successful await."""
        return self._last_await_id

    def poke(self) -> None:
        """Let the transport do its housekeeping."""
        self._transport.poke()

    def has_response(self) -> bool:
        """True if a response is ready to be read by await_response()."""
        return self._transport.to_return_count() > 0

    def is_complete(self) -> bool:
        """True if nothing is pending or waiting to be returned."""
        return self._transport.total_count() == 0

    def await_response(self) -> tuple[Any, Hashable] | tuple[None, None]:
        """Block until the next response completes and return (result, resource_id).

        Returns (None, None) when there is nothing left to wait for. Failed
        requests still update last_await_id before their exception propagates.
        """
        try:
            received = self._transport.wait_for_next_response()
        except Exception as exc:
            transport_id = getattr(exc, "request_id", None)
            if transport_id is not None:
                self._resolve(transport_id)
            raise
        if received is None:
            return None, None

        response, transport_id = received
        resource_id = self._resolve(transport_id)

        return self._decoder.decode(response), resource_id

    def _resolve(self, transport_id: Hashable) -> Hashable:
        resource_id = self._task_map.pop(transport_id, transport_id)
        self._last_await_id = resource_id
        logger.debug("Request %s resolved to resource %r", transport_id, resource_id)
        return resource_id

    def __iter__(self) -> Iterator[tuple[Any, Hashable]]:
        while True:
            result, resource_id = self.await_response()
            if resource_id is None:
                return
            yield result, resource_id
