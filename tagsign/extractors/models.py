# tagsign/extractors/models.py
from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import NoTagsFound


def display_name(name: str) -> str:
    """client_signature -> "Client Signature"."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in name.split("_"))


@dataclass(frozen=True)
class FieldArea:
    x: float                   # 0..1 of page width
    y: float                   # 0..1 of page height
    w: float
    h: float
    page: int                  # 1-indexed

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h, "page": self.page}


@dataclass
class ExtractedField:
    original_tag: str          # "{{provider_signature}}"
    name: str                  # "provider_signature"
    type: str                  # signature | text | date | ...
    role: str                  # "Service Provider"
    required: bool = True
    readonly: bool = False
    default_value: Optional[str] = None
    placeholder: Optional[str] = None
    areas: List[FieldArea] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def display_name(self) -> str:
        return display_name(self.name)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "originalTag": self.original_tag,
            "name": self.name,
            "displayName": self.display_name,
            "type": self.type,
            "role": self.role,
            "required": self.required,
            "readonly": self.readonly,
            "areas": [a.to_dict() for a in self.areas],
        }
        if self.default_value is not None:
            out["defaultValue"] = self.default_value
        if self.placeholder is not None:
            out["placeholder"] = self.placeholder
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedField":
        """Accepts the camelCase shape produced by to_dict (ids are kept when present)."""
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValueError("field name is required")
        kwargs: Dict[str, Any] = dict(
            original_tag=data.get("originalTag") or f"{{{{{name}}}}}",
            name=name,
            type=data.get("type") or "text",
            role=data.get("role") or "First Party",
            required=data.get("required", True) is not False,
            readonly=data.get("readonly") in (True, "true"),
            default_value=data.get("defaultValue", data.get("default_value")),
            placeholder=data.get("placeholder"),
            areas=[FieldArea(**a) for a in (data.get("areas") or [])],
        )
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)


@dataclass
class TextExtraction:
    text: str
    page_count: Optional[int]  # None when the format has no real pages (docx)
    info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    success: bool
    fields: List[ExtractedField] = field(default_factory=list)
    page_count: int = 0
    file_type: Optional[str] = None   # "pdf" | "docx"
    error: Optional[str] = None
    debug: Dict[str, Any] = field(default_factory=dict)

    def raise_for_status(self) -> "ExtractionResult":
        if not self.success:
            raise NoTagsFound(self.error or "no tags found", debug=self.debug)
        return self

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "fields": [f.to_dict() for f in self.fields],
            "pageCount": self.page_count,
        }
        if self.file_type:
            out["fileType"] = self.file_type
        if not self.success:
            out["error"] = self.error
            out["debug"] = dict(self.debug)
        return out
