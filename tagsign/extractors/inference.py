# tagsign/extractors/inference.py
from __future__ import annotations
from typing import List, Tuple

from .patterns import (
    FIELD_TYPES, FIELD_TYPE_PATTERNS, ROLE_PATTERNS, AVAILABLE_ROLES,
    FIELD_TYPE_DESCRIPTIONS, DEFAULT_FIELD_TYPE, DEFAULT_ROLE,
)


def _first_match(tag_name: str, table: Tuple[Tuple[str, Tuple[str, ...]], ...], default: str) -> str:
    low = (tag_name or "").lower()
    for label, needles in table:
        for needle in needles:
            if needle.lower() in low:
                return label
    return default


def infer_field_type(tag_name: str) -> str:
    """
    provider_signature -> "signature". Walks FIELD_TYPE_PATTERNS in declared
    order; a name hitting two types (contract_date_signature) resolves by table
    order, not by position in the name.
    """
    return _first_match(tag_name, FIELD_TYPE_PATTERNS, DEFAULT_FIELD_TYPE)


def infer_role(tag_name: str) -> str:
    """provider_signature -> "Service Provider"; "First Party" when nothing matches."""
    return _first_match(tag_name, ROLE_PATTERNS, DEFAULT_ROLE)


def available_field_types() -> List[str]:
    return list(FIELD_TYPES)


def available_roles() -> List[str]:
    return list(AVAILABLE_ROLES)


def is_valid_field_type(value: str) -> bool:
    return value in FIELD_TYPES


def field_type_description(field_type: str) -> str:
    return FIELD_TYPE_DESCRIPTIONS.get(field_type, "Unknown field type")
