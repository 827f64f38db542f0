# tagsign/extractors/validators.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

DEFAULT_MAX_MB = 10


def validate_file_size(size: int, max_mb: int = DEFAULT_MAX_MB) -> bool:
    return 0 <= size <= max_mb * 1024 * 1024


def validate_template_body(body: Dict[str, Any]) -> Optional[str]:
    """Error message for a bad create-template body, None when it is usable."""
    missing = [k for k in ("name", "documentName", "documentBase64", "fields") if not body.get(k)]
    if missing:
        return "Missing required fields: name, documentName, documentBase64, fields"
    fields = body.get("fields")
    if not isinstance(fields, list) or not fields:
        return "Fields must be a non-empty array"
    if not all(isinstance(f, dict) for f in fields):
        return "Each field must be an object"
    if body.get("fileType") not in (None, "pdf", "docx"):
        return "fileType must be 'pdf' or 'docx'"
    return None


def validate_submission_body(body: Dict[str, Any]) -> Optional[str]:
    if not body.get("template_id"):
        return "Missing required field: template_id"
    submitters: List[Dict[str, Any]] = body.get("submitters") or []
    if not isinstance(submitters, list) or not submitters:
        return "Submitters must be a non-empty array"
    for s in submitters:
        if not isinstance(s, dict) or not s.get("email"):
            return "Each submitter must have an email address"
        if not s.get("role"):
            return "Each submitter must have a role"
    return None
