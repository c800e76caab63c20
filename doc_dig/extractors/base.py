"""
Shared pieces for document extraction.

Defines the error raised by every extraction entry point and the helpers
that turn the extraction library's output into an ExtractedDocument.
"""

from pathlib import Path
from typing import Any, Protocol

from doc_dig.models import ExtractedDocument, SourceKind

# Read size for draining extraction streams
STREAM_CHUNK_SIZE = 64 * 1024


class ExtractionError(Exception):
    """
    Raised when document extraction fails.

    Contains the source that failed and the underlying cause.
    """

    def __init__(self, message: str, source: str | Path, cause: Exception | None = None):
        self.source = str(source)
        self.cause = cause
        super().__init__(f"Failed to extract '{source}': {message}")


class ByteStream(Protocol):
    """Readable stream returned by the extraction library."""

    def read(self, size: int) -> bytes: ...


def read_stream(stream: ByteStream, source: str | Path) -> str:
    """
    Drain an extraction stream and decode it as UTF-8.

    Args:
        stream: Stream returned by the extraction library.
        source: Source description for error messages.

    Returns:
        The decoded text.

    Raises:
        ExtractionError: If reading fails or the content is not valid UTF-8.
    """
    chunks: list[bytes] = []
    try:
        while True:
            chunk = stream.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(bytes(chunk))
    except Exception as e:
        raise ExtractionError(f"Error reading extracted stream: {e}", source, cause=e) from e

    try:
        return b"".join(chunks).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError("Extracted content is not valid UTF-8", source, cause=e) from e


def normalize_metadata(metadata: Any) -> dict[str, list[str]]:
    """Coerce library metadata into a plain `{key: [values]}` mapping."""
    if not metadata:
        return {}

    normalized: dict[str, list[str]] = {}
    for key, value in dict(metadata).items():
        if isinstance(value, (list, tuple)):
            normalized[str(key)] = [str(v) for v in value]
        else:
            normalized[str(key)] = [str(value)]
    return normalized


def create_result(
    content: str,
    metadata: Any,
    source: str | Path,
    source_kind: SourceKind,
) -> ExtractedDocument:
    """
    Create an ExtractedDocument from extracted content.

    Args:
        content: The extracted text content.
        metadata: Metadata reported by the extraction library.
        source: Path, URL or placeholder describing the source.
        source_kind: Kind of source.

    Returns:
        ExtractedDocument instance.
    """
    return ExtractedDocument(
        content=content,
        metadata=normalize_metadata(metadata),
        source=str(source),
        source_kind=source_kind,
    )
