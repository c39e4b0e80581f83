"""Transport — single-threaded non-blocking HTTP multiplexing."""

from hrxml.transport.async_ua import AsyncUserAgent

__all__ = ["AsyncUserAgent"]
