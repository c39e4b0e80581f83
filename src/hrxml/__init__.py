"""hrxml — concurrent client for an HR-XML resume-parsing web service."""

from hrxml.async_response import AsyncResponse
from hrxml.client import ResumeParser
from hrxml.parser.response_parser import ResumeDecoder, handle_parser_data, parse_hrxml
from hrxml.transport.async_ua import AsyncUserAgent
from hrxml.types import ContactInfo, Document, Education, ParsedResume, Position

__version__ = "0.1.0"

__all__ = [
    "AsyncResponse",
    "AsyncUserAgent",
    "ContactInfo",
    "Document",
    "Education",
    "ParsedResume",
    "Position",
    "ResumeDecoder",
    "ResumeParser",
    "handle_parser_data",
    "parse_hrxml",
]
