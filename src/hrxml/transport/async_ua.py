"""Non-blocking HTTP user agent driven from a single caller thread.

The agent owns a private asyncio event loop that never runs in the
background. Requests only make progress while the caller is inside one of
poke(), to_return_count(), total_count() or wait_for_next_response(), so
long stretches without any of those calls let the service side time out.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Coroutine
from typing import Any, TypeVar

import httpx

from hrxml.config.defaults import (
    DEFAULT_MAX_REQUEST_TIME,
    DEFAULT_POKE_TIMEOUT,
    DEFAULT_SLOTS,
    DEFAULT_TIMEOUT,
)
from hrxml.errors.exceptions import GatewayTimeoutError, TransportClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncUserAgent:
    """Multiplexes many in-flight HTTP requests over one httpx.AsyncClient.

    Each request is identified by an integer id handed out by add(). Completed
    responses queue up until wait_for_next_response() returns them, oldest
    first.
    """

    def __init__(
        self,
        slots: int = DEFAULT_SLOTS,
        timeout: float = DEFAULT_TIMEOUT,
        max_request_time: float = DEFAULT_MAX_REQUEST_TIME,
        poke_timeout: float = DEFAULT_POKE_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if slots < 1:
            raise ValueError(f"slots must be at least 1, got {slots}")

        self._slots = slots
        self._max_request_time = max_request_time
        self._poke_timeout = poke_timeout
        self._timeout = httpx.Timeout(timeout)

        self._loop = asyncio.new_event_loop()
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            limits=httpx.Limits(max_connections=slots),
            transport=transport,
        )
        self._semaphore = asyncio.Semaphore(slots)

        self._next_id = 1
        self._in_progress: dict[int, asyncio.Task[httpx.Response]] = {}
        self._to_return: OrderedDict[int, asyncio.Task[httpx.Response]] = OrderedDict()
        self._closed = False

    @property
    def slots(self) -> int:
        return self._slots

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, request: httpx.Request) -> int:
        """Queue a request for sending and return its id."""
        self._check_open()

        # Client defaults only apply through build_request(), not send()
        request.extensions.setdefault("timeout", self._timeout.as_dict())

        request_id = self._next_id
        self._next_id += 1
        self._in_progress[request_id] = self._loop.create_task(self._send(request_id, request))
        logger.debug("Queued request %d: %s %s", request_id, request.method, request.url)
        return request_id

    def poke(self) -> None:
        """Service ready sockets for a short slice without waiting for completion."""
        self._check_open()
        if self._in_progress:
            self._run(asyncio.sleep(self._poke_timeout))
        self._collect_finished()

    def to_return_count(self) -> int:
        """Number of completed responses not yet returned."""
        self.poke()
        return len(self._to_return)

    def in_progress_count(self) -> int:
        """Number of requests queued or on the wire."""
        self.poke()
        return len(self._in_progress)

    def total_count(self) -> int:
        """Number of requests not yet returned, pending or completed."""
        self.poke()
        return len(self._in_progress) + len(self._to_return)

    def wait_for_next_response(self) -> tuple[httpx.Response, int] | None:
        """Block until a response is available and return it with its id.

        Returns None when nothing is pending or queued. A request that
        failed raises its exception here, tagged with a request_id
        attribute.
        """
        self._check_open()
        self._collect_finished()

        if not self._to_return:
            if not self._in_progress:
                return None
            self._run(
                asyncio.wait(
                    list(self._in_progress.values()),
                    return_when=asyncio.FIRST_COMPLETED,
                )
            )
            self._collect_finished()

        request_id, task = self._to_return.popitem(last=False)
        try:
            response = task.result()
        except Exception as exc:
            # Callers map failures back to their request through this attribute
            exc.request_id = request_id
            raise
        logger.debug("Returning request %d: HTTP %d", request_id, response.status_code)
        return response, request_id

    def close(self) -> None:
        """Cancel outstanding requests, close connections and the loop."""
        if self._closed:
            return
        self._closed = True

        outstanding = list(self._in_progress.values())
        for task in outstanding:
            task.cancel()
        if outstanding:
            self._run(asyncio.gather(*outstanding, return_exceptions=True))
            logger.debug("Cancelled %d outstanding request(s) on close", len(outstanding))

        # Mark failures nobody collected as retrieved
        for task in self._to_return.values():
            if not task.cancelled():
                task.exception()

        self._in_progress.clear()
        self._to_return.clear()
        self._run(self._client.aclose())
        self._loop.close()
        logger.debug("Async user agent closed")

    def __enter__(self) -> AsyncUserAgent:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def _send(self, request_id: int, request: httpx.Request) -> httpx.Response:
        async with self._semaphore:
            try:
                return await asyncio.wait_for(
                    self._client.send(request),
                    timeout=self._max_request_time,
                )
            except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
                logger.warning("Request %d timed out: %s %s", request_id, request.method, request.url)
                raise GatewayTimeoutError(
                    f"Request {request_id} to {request.url} timed out",
                    original=exc,
                ) from exc

    def _collect_finished(self) -> None:
        for request_id in [rid for rid, task in self._in_progress.items() if task.done()]:
            self._to_return[request_id] = self._in_progress.pop(request_id)

    def _run(self, coro: Coroutine[Any, Any, T]) -> T:
        return self._loop.run_until_complete(coro)

    def _check_open(self) -> None:
        if self._closed:
            raise TransportClosedError("Async user agent is closed")
