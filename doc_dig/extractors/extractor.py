"""
Extraction entry points.

Four thin wrappers over the `extractous` library. Each returns an
ExtractedDocument or raises ExtractionError; parsing itself is entirely
the library's job.
"""

from pathlib import Path

from loguru import logger

from doc_dig.extractors.base import ExtractionError, create_result, read_stream
from doc_dig.extractors.factory import create_extractor
from doc_dig.models import ExtractedDocument, SourceKind

BYTES_SOURCE = "<bytes>"


def _check_file(file_path: Path) -> None:
    if not file_path.exists():
        raise ExtractionError("File does not exist", file_path)
    if not file_path.is_file():
        raise ExtractionError("Path is not a file", file_path)


def extract_file(file_path: Path | str) -> ExtractedDocument:
    """
    Extract text from a local file.

    Args:
        file_path: Path to the document.

    Returns:
        ExtractedDocument with the text and metadata.

    Raises:
        ExtractionError: If the file is missing or extraction fails.
    """
    path = Path(file_path)
    _check_file(path)

    try:
        content, metadata = create_extractor().extract_file_to_string(str(path))
    except Exception as e:
        raise ExtractionError(str(e), path, cause=e) from e

    logger.debug(f"Extracted {len(content)} characters from {path}")
    return create_result(content, metadata, path, SourceKind.FILE)


def extract_url(url: str) -> ExtractedDocument:
    """
    Fetch a remote document and extract its text.

    Raises:
        ExtractionError: If fetching or extraction fails.
    """
    try:
        stream, metadata = create_extractor().extract_url(url)
    except Exception as e:
        raise ExtractionError(str(e), url, cause=e) from e

    content = read_stream(stream, url)
    logger.debug(f"Extracted {len(content)} characters from {url}")
    return create_result(content, metadata, url, SourceKind.URL)


def extract_bytes(data: bytes | bytearray) -> ExtractedDocument:
    """
    Extract text from an in-memory document.

    Args:
        data: Raw document bytes.

    Raises:
        ExtractionError: If extraction fails.
    """
    try:
        stream, metadata = create_extractor().extract_bytes(bytearray(data))
    except Exception as e:
        raise ExtractionError(str(e), BYTES_SOURCE, cause=e) from e

    content = read_stream(stream, BYTES_SOURCE)
    return create_result(content, metadata, BYTES_SOURCE, SourceKind.BYTES)


def extract_file_ocr(file_path: Path | str, language: str | None = None) -> ExtractedDocument:
    """
    Extract text from a local file, forcing OCR.

    Args:
        file_path: Path to the document.
        language: Tesseract language code (default from settings, "eng").

    Raises:
        ExtractionError: If the file is missing or extraction fails.
    """
    path = Path(file_path)
    _check_file(path)

    try:
        content, metadata = create_extractor(ocr=True, language=language).extract_file_to_string(
            str(path)
        )
    except Exception as e:
        raise ExtractionError(str(e), path, cause=e) from e

    return create_result(content, metadata, path, SourceKind.FILE)
