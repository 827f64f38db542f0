# tagsign/extractors/errors.py
from __future__ import annotations
from typing import Any, Dict, Optional


class TagsignError(Exception):
    code = "internal_error"


class UnsupportedFormat(TagsignError):
    """Neither PDF nor DOCX (by declared type, extension or content)."""
    code = "unsupported_type"


class ExtractorFault(TagsignError):
    """The format library could not read the bytes (corrupt file, odd structure)."""
    code = "extraction_failed"


class NoTagsFound(TagsignError):
    code = "no_tags_found"

    def __init__(self, message: str, debug: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.debug = debug or {}
