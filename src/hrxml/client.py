"""Client for the resume-parsing web service."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from pathlib import Path
from typing import Any, Union

import httpx

from hrxml.async_response import AsyncResponse
from hrxml.config.hierarchy import load_config_hierarchy
from hrxml.documents import load_document
from hrxml.parser.response_parser import ResumeDecoder
from hrxml.transport.async_ua import AsyncUserAgent
from hrxml.types import Document, ParsedResume

logger = logging.getLogger(__name__)

DocumentSource = Union[str, Path, bytes, Document]


class ResumeParser:
    """Submits resumes to the parsing service over a shared non-blocking user agent.

    Every AsyncResponse created by one parser shares its AsyncUserAgent, so
    drain one batch before starting the next or responses may be collected
    by the wrong handle.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        slots: int | None = None,
        timeout: float | None = None,
        max_request_time: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **overrides: Any,
    ) -> None:
        self._config = load_config_hierarchy(
            base_url=base_url,
            api_key=api_key,
            slots=slots,
            timeout=timeout,
            max_request_time=max_request_time,
            **overrides,
        )
        self._transport = transport
        self._async_ua: AsyncUserAgent | None = None
        self._decoder = ResumeDecoder()
        # Resource ids registered by submit(), handed to the next tracker
        self._registered: dict[int, Hashable] = {}

    @property
    def config(self) -> dict[str, Any]:
        return dict(self._config)

    @property
    def parse_url(self) -> str:
        return str(self._config["base_url"]).rstrip("/") + "/" + str(
            self._config["parse_path"]
        ).lstrip("/")

    @property
    def async_ua(self) -> AsyncUserAgent:
        """The shared user agent, created on first use."""
        if self._async_ua is None:
            self._async_ua = self._new_user_agent()
        return self._async_ua

    def build_request(self, document: Document) -> httpx.Request:
        """Build the multipart upload request for one document."""
        return httpx.Request(
            "POST",
            self.parse_url,
            headers=self._default_headers(),
            files={"document": (document.filename, document.content, document.content_type)},
        )

    def submit(self, document: DocumentSource, resource_id: Hashable | None = None) -> int:
        """Send one document over the shared user agent and return its request id.

        A resource_id is pre-registered for the next AsyncResponse created by
        async_response() or parse_resume_async().
        """
        doc = load_document(document)
        request_id = self.async_ua.add(self.build_request(doc))
        if resource_id is not None:
            self._registered[request_id] = resource_id
        logger.info("Submitted %s as request %d", doc.filename, request_id)
        return request_id

    def async_response(self) -> AsyncResponse:
        """Tracker for everything submitted so far, claiming pending registrations."""
        task_map, self._registered = self._registered, {}
        return AsyncResponse(self.async_ua, self._decoder, task_map)

    def parse_resume_async(
        self,
        documents: Mapping[Hashable, DocumentSource] | DocumentSource | Iterable[DocumentSource],
    ) -> AsyncResponse:
        """Submit documents for parsing and return a handle to collect results.

        Args:
            documents: Mapping of resource id -> document, a single document,
                or an iterable of documents. Documents given without a resource
                id are reported under their transport request id.
        """
        if isinstance(documents, Mapping):
            for resource_id, document in documents.items():
                self.submit(document, resource_id)
        elif isinstance(documents, (str, Path, bytes, Document)):
            self.submit(documents)
        else:
            for document in documents:
                self.submit(document)

        return self.async_response()

    def parse_resume(self, document: DocumentSource) -> ParsedResume:
        """Parse one document, blocking until the service answers.

        Uses a private user agent so outstanding async batches are untouched.
        """
        doc = load_document(document)
        with self._new_user_agent() as ua:
            ua.add(self.build_request(doc))
            result, _ = AsyncResponse(ua, self._decoder).await_response()
        return result

    def close(self) -> None:
        if self._async_ua is not None:
            self._async_ua.close()
            self._async_ua = None
        self._registered.clear()

    def __enter__(self) -> ResumeParser:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _new_user_agent(self) -> AsyncUserAgent:
        return AsyncUserAgent(
            slots=int(self._config["slots"]),
            timeout=float(self._config["timeout"]),
            max_request_time=float(self._config["max_request_time"]),
            poke_timeout=float(self._config["poke_timeout"]),
            transport=self._transport,
        )

    def _default_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/xml"}
        api_key = self._config.get("api_key")
        if api_key:
            headers[self._config["api_key_header"]] = str(api_key)
        return headers
