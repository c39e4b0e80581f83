"""Parser — decode parsing-service responses into ParsedResume."""

from hrxml.parser.response_parser import ResumeDecoder, handle_parser_data, parse_hrxml

__all__ = ["ResumeDecoder", "handle_parser_data", "parse_hrxml"]
