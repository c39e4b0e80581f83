"""Document loading for upload to the parsing service."""

from __future__ import annotations

from pathlib import Path

from hrxml.types import Document

_CONTENT_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".rtf": "application/rtf",
    ".txt": "text/plain",
    ".html": "text/html",
    ".htm": "text/html",
    ".odt": "application/vnd.oasis.opendocument.text",
}
SUPPORTED_EXTENSIONS = frozenset(_CONTENT_TYPES)

_MAX_DOCUMENT_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB
_DEFAULT_FILENAME = "resume"


def load_document(source: str | Path | bytes | Document, filename: str | None = None) -> Document:
    """Turn a path, raw bytes or an existing Document into an upload payload."""
    if isinstance(source, Document):
        return source

    if isinstance(source, (bytes, bytearray)):
        name = filename or _DEFAULT_FILENAME
        return Document(
            filename=name,
            content_type=content_type_for(name),
            content=bytes(source),
        )

    path = Path(source)
    _validate_path(path)
    name = filename or path.name
    return Document(
        filename=name,
        content_type=content_type_for(path.name),
        content=path.read_bytes(),
    )


def content_type_for(filename: str) -> str:
    return _CONTENT_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


def is_supported(path: str | Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def _validate_path(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.is_symlink():
        raise ValueError(f"Symlinks not allowed: {path}")
    if not is_supported(path):
        raise ValueError(f"Unsupported file type: {path.suffix}")
    size = path.stat().st_size
    if size > _MAX_DOCUMENT_SIZE_BYTES:
        raise ValueError(f"File too large ({size} bytes, max {_MAX_DOCUMENT_SIZE_BYTES})")
