"""
Extractor factory module.

Builds configured `extractous` extractors for plain and OCR-only extraction.
"""

from extractous import Extractor, PdfOcrStrategy, PdfParserConfig, TesseractOcrConfig

from doc_dig.config import get_settings


def create_extractor(ocr: bool = False, language: str | None = None) -> Extractor:
    """
    Create an extraction library extractor.

    Args:
        ocr: Force OCR for PDFs instead of reading their text layer.
        language: Tesseract language code for OCR. Uses the configured
            default when not provided.

    Returns:
        A configured Extractor.
    """
    extractor = Extractor()
    if not ocr:
        return extractor

    lang = language or get_settings().ocr_language
    return extractor.set_ocr_config(TesseractOcrConfig().set_language(lang)).set_pdf_config(
        PdfParserConfig().set_ocr_strategy(PdfOcrStrategy.OCR_ONLY)
    )
