# tagsign/extractors/tags.py
from __future__ import annotations
import re
from typing import Dict, List, Tuple

from .patterns import TAG_RE
from .models import ExtractedField
from .inference import infer_field_type, infer_role

KNOWN_ATTRS = ("type", "role", "required", "readonly", "default_value", "placeholder")

_UNSAFE_NAME_RE = re.compile(r"[^a-zA-Z0-9_]")


def parse_tag(inner: str) -> Tuple[str, Dict[str, str]]:
    """
    "amt; type=number ;required=false" -> ("amt", {"type": "number", "required": "false"})
    Parts without "=" (or with an empty key/value) are skipped, unknown keys dropped.
    """
    parts = inner.strip().split(";")
    name = parts[0].strip()
    attrs: Dict[str, str] = {}
    for part in parts[1:]:
        key, sep, value = part.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or not value:
            continue
        if key in KNOWN_ATTRS:
            attrs[key] = value
    return name, attrs


def _build_field(original_tag: str, name: str, attrs: Dict[str, str]) -> ExtractedField:
    return ExtractedField(
        original_tag=original_tag,
        name=name,
        type=attrs.get("type") or infer_field_type(name),
        role=attrs.get("role") or infer_role(name),
        required=attrs.get("required") != "false",
        readonly=attrs.get("readonly") == "true",
        default_value=attrs.get("default_value"),
        placeholder=attrs.get("placeholder"),
    )


def extract_tags(text: str) -> List[ExtractedField]:
    """
    Every unique {{tag}} in first-seen order, areas left empty.
    A repeated name is dropped entirely, its attributes included.
    """
    seen: Dict[str, ExtractedField] = {}
    for m in TAG_RE.finditer(text or ""):
        name, attrs = parse_tag(m.group(1))
        if name in seen:
            continue
        seen[name] = _build_field(m.group(0), name, attrs)
    return list(seen.values())


def find_tags(text: str) -> List[str]:
    """Raw matched tags, duplicates included (debug logging)."""
    return [m.group(0) for m in TAG_RE.finditer(text or "")]


def sanitize_field_name(name: str) -> str:
    return _UNSAFE_NAME_RE.sub("_", name)
