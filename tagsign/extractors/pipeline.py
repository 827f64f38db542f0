# tagsign/extractors/pipeline.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional

from ..logging import get_logger
from .errors import UnsupportedFormat
from .io_docs import EXTRACTORS
from .layout import estimate_page_count, synthesize_layout
from .models import ExtractionResult
from .patterns import ERROR_MESSAGES
from .tags import extract_tags, find_tags

logger = get_logger(__name__)

PREVIEW_CHARS = 200

CONTENT_TYPES: Dict[str, str] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}
EXTENSIONS: Dict[str, str] = {".pdf": "pdf", ".docx": "docx"}

MIME_BY_FORMAT: Dict[str, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def detect_format(filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """Declared content type first, file extension second."""
    ctype = (content_type or "").split(";")[0].strip().lower()
    if ctype in CONTENT_TYPES:
        return CONTENT_TYPES[ctype]
    ext = Path(filename or "").suffix.lower()
    if ext in EXTENSIONS:
        return EXTENSIONS[ext]
    raise UnsupportedFormat(ERROR_MESSAGES["INVALID_FILE_TYPE"])


def _debug(text: str) -> Dict[str, Any]:
    return {
        "textLength": len(text),
        "textPreview": text[:PREVIEW_CHARS],
        "hasText": bool(text),
    }


def extract_document(data: bytes, file_format: str, ocr: str = "auto",
                     lang: Optional[str] = None, max_pages: Optional[int] = None) -> ExtractionResult:
    """
    bytes -> text -> unique tags -> synthetic layout.
    file_format: "pdf" | "docx"
    ocr:         "auto" | "force" | "off" (pdf only)
    lang, max_pages: Tesseract language and page cap for the OCR pass
    """
    extractor = EXTRACTORS.get((file_format or "").lower())
    if extractor is None:
        raise UnsupportedFormat(f"unsupported_format:{file_format}")
    fmt = file_format.lower()

    extraction = extractor(data, ocr=ocr, lang=lang, max_pages=max_pages)
    text = extraction.text or ""

    fields = extract_tags(text)
    if not fields:
        logger.info("no_tags_found", file_type=fmt, text_length=len(text), io_info=extraction.info)
        return ExtractionResult(
            success=False,
            file_type=fmt,
            error=ERROR_MESSAGES["NO_TAGS_FOUND"],
            debug=_debug(text),
        )

    # pdf knows its pages and clamps; docx only gets an estimate for display
    if extraction.page_count is not None:
        page_count = extraction.page_count
        synthesize_layout(fields, page_count=page_count)
    else:
        page_count = estimate_page_count(len(fields))
        synthesize_layout(fields)

    logger.info(
        "tags_extracted",
        file_type=fmt,
        page_count=page_count,
        text_length=len(text),
        tags=find_tags(text),
        fields=len(fields),
        io_info=extraction.info,
    )
    return ExtractionResult(success=True, fields=fields, page_count=page_count, file_type=fmt)
