"""
Document Extraction Module.

Thin entry points over the `extractous` extraction library:
- local files
- remote URLs
- in-memory bytes
- local files with forced OCR
"""

from doc_dig.extractors.base import ExtractionError
from doc_dig.extractors.extractor import extract_bytes, extract_file, extract_file_ocr, extract_url
from doc_dig.extractors.factory import create_extractor

__all__ = [
    "ExtractionError",
    "create_extractor",
    "extract_bytes",
    "extract_file",
    "extract_file_ocr",
    "extract_url",
]
