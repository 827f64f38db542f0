# tagsign/extractors/layout.py
"""
Synthetic preview boxes: a two-column grid in page fractions.

Neither pdfium text nor docx paragraphs give us where a tag sits on the page,
so every field gets a deterministic slot instead. DocuSeal positions the real
fields from the tags themselves; these boxes only feed the preview.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .models import ExtractedField, FieldArea

LEFT_X = 0.10
RIGHT_X = 0.55
FIELD_HEIGHT = 0.04
FIELD_WIDTH = 0.35
V_GAP = 0.015
USABLE_HEIGHT = 0.95
TOP_MARGIN = 0.05
FIELDS_PER_PAGE_ESTIMATE = 25

# type -> (height, width) ; anything else uses FIELD_HEIGHT / FIELD_WIDTH
SIZE_OVERRIDES: Dict[str, Tuple[float, float]] = {
    "signature": (0.08, FIELD_WIDTH),
    "initials":  (0.08, FIELD_WIDTH),
    "checkbox":  (0.03, 0.03),
    "image":     (0.12, FIELD_WIDTH),
}


@dataclass(frozen=True)
class LayoutCursor:
    page: int = 1
    y: float = TOP_MARGIN
    index: int = 0


def field_size(field_type: str) -> Tuple[float, float]:
    return SIZE_OVERRIDES.get(field_type, (FIELD_HEIGHT, FIELD_WIDTH))


def place(cursor: LayoutCursor, field_type: str,
          page_limit: Optional[int] = None) -> Tuple[FieldArea, LayoutCursor]:
    """
    One step of the grid. Even indexes go left, odd right; y only moves after
    a right-column placement, so a tall left field can overlap the next row.
    """
    h, w = field_size(field_type)
    right = cursor.index % 2 == 1
    x = RIGHT_X if right else LEFT_X

    page, y = cursor.page, cursor.y
    if y + h > USABLE_HEIGHT:
        page, y = page + 1, TOP_MARGIN

    shown_page = min(page, page_limit) if page_limit else page
    area = FieldArea(x=x, y=y, w=w, h=h, page=shown_page)

    next_y = y + h + V_GAP if right else y
    return area, replace(cursor, page=page, y=next_y, index=cursor.index + 1)


def synthesize_layout(fields: Sequence[ExtractedField],
                      page_count: Optional[int] = None) -> List[ExtractedField]:
    """
    Gives each field exactly one area, in the given order. page_count clamps
    the page (pdf); None leaves it unclamped (docx).
    """
    cursor = LayoutCursor()
    for f in fields:
        area, cursor = place(cursor, f.type, page_limit=page_count)
        f.areas = [area]
    return list(fields)


def estimate_page_count(n_fields: int) -> int:
    return math.ceil(n_fields / FIELDS_PER_PAGE_ESTIMATE) or 1
