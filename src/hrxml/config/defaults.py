"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Parsing service
DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_PARSE_PATH = "/v1/resumes/parse"
DEFAULT_API_KEY_HEADER = "X-Api-Key"

# Transport settings
DEFAULT_SLOTS = 20
DEFAULT_TIMEOUT = 180.0
DEFAULT_MAX_REQUEST_TIME = 300.0
DEFAULT_POKE_TIMEOUT = 0.01

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "api_key": None,
        "base_url": DEFAULT_BASE_URL,
        "parse_path": DEFAULT_PARSE_PATH,
        "api_key_header": DEFAULT_API_KEY_HEADER,
        "slots": DEFAULT_SLOTS,
        "timeout": DEFAULT_TIMEOUT,
        "max_request_time": DEFAULT_MAX_REQUEST_TIME,
        "poke_timeout": DEFAULT_POKE_TIMEOUT,
        "log_level": DEFAULT_LOG_LEVEL,
    }
