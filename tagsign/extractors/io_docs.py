# tagsign/extractors/io_docs.py
from __future__ import annotations
import io
from typing import Callable, Dict, Iterator, List, Optional

import pypdfium2 as pdfium
import pytesseract
from PIL import Image, ImageOps
from docx import Document

from .errors import ExtractorFault
from .models import TextExtraction

DEFAULT_OCR_LANG = "eng"


def _tess_config() -> str:
    # LSTM, single text block; braces must stay readable for {{tags}}
    return "--oem 1 --psm 6"


def _open_pdf(data: bytes) -> pdfium.PdfDocument:
    try:
        return pdfium.PdfDocument(data)
    except Exception as e:
        raise ExtractorFault(f"pdf_read_error:{type(e).__name__}:{e}") from e


def _render_pages(doc: pdfium.PdfDocument, dpi: int = 300,
                  max_pages: Optional[int] = None) -> Iterator[Image.Image]:
    n = len(doc)
    limit = min(n, max_pages) if max_pages else n
    for i in range(limit):
        page = doc.get_page(i)
        try:
            pil = page.render(scale=dpi / 72.0).to_pil()
        finally:
            page.close()
        yield ImageOps.grayscale(pil)


def _ocr_pages(doc: pdfium.PdfDocument, lang: str, max_pages: Optional[int]) -> str:
    chunks: List[str] = []
    for img in _render_pages(doc, dpi=300, max_pages=max_pages):
        txt = pytesseract.image_to_string(img, lang=lang, config=_tess_config()) or ""
        chunks.append(txt.replace("\u00a0", " "))
    return "\n".join(chunks)


def pdf_text(data: bytes, ocr: str = "auto", lang: Optional[str] = None,
             max_pages: Optional[int] = None) -> TextExtraction:
    """
    Text layer of every page, one "\\n" after each page (page breaks are not kept
    otherwise). ocr: "auto" runs Tesseract only on a blank text layer,
    "force" always, "off" never. OCR errors land in info, they never raise.
    """
    doc = _open_pdf(data)
    info: Dict = {"engine": "pypdfium2"}
    try:
        page_count = len(doc)
        chunks: List[str] = []
        try:
            for i in range(page_count):
                page = doc.get_page(i)
                textpage = page.get_textpage()
                chunks.append((textpage.get_text_range() or "").replace("\r\n", "\n"))
                textpage.close()
                page.close()
        except Exception as e:
            raise ExtractorFault(f"pdf_text_error:{type(e).__name__}:{e}") from e
        text = "".join(c + "\n" for c in chunks)

        if ocr == "force" or (ocr == "auto" and not text.strip() and page_count):
            ocr_lang = lang or DEFAULT_OCR_LANG
            try:
                ocr_txt = _ocr_pages(doc, ocr_lang, max_pages)
                if ocr_txt.strip():
                    text = ocr_txt
                    info["engine"] = "ocr_tesseract"
                    info["fallback"] = "forced" if ocr == "force" else "auto_triggered"
                info["ocr_lang"] = ocr_lang
            except Exception as e:
                info["ocr_error"] = f"{type(e).__name__}:{e}"
    finally:
        doc.close()

    return TextExtraction(text=text, page_count=page_count, info=info)


def _docx_blocks(doc) -> Iterator[str]:
    for para in doc.paragraphs:
        yield para.text
    for table in doc.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                yield " | ".join(cells)
    for section in doc.sections:
        for part in (section.header, section.footer):
            for para in part.paragraphs:
                if para.text.strip():
                    yield para.text


def docx_text(data: bytes, **_options: object) -> TextExtraction:
    """Raw text of body, tables, headers and footers. No page count: Word reflows."""
    try:
        doc = Document(io.BytesIO(data))
        text = "\n".join(_docx_blocks(doc))
    except Exception as e:
        raise ExtractorFault(f"docx_read_error:{type(e).__name__}:{e}") from e
    return TextExtraction(text=text, page_count=None, info={"engine": "python-docx"})


EXTRACTORS: Dict[str, Callable[..., TextExtraction]] = {
    "pdf": pdf_text,
    "docx": docx_text,
}
