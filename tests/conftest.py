import io

import pypdfium2 as pdfium
import pytest
from docx import Document

from tagsign.config import AppConfig


@pytest.fixture()
def make_docx():
    def _make(paragraphs, table_rows=None):
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table_rows:
            table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
            for r, row in enumerate(table_rows):
                for c, value in enumerate(row):
                    table.cell(r, c).text = value
        buf = io.BytesIO()
        doc.save(buf)
        return buf.getvalue()

    return _make


@pytest.fixture()
def blank_pdf():
    def _make(pages=1):
        pdf = pdfium.PdfDocument.new()
        for _ in range(pages):
            pdf.new_page(612, 792)
        buf = io.BytesIO()
        pdf.save(buf)
        pdf.close()
        return buf.getvalue()

    return _make


@pytest.fixture()
def app_config():
    return AppConfig(
        docuseal_api_key="test-key",
        docuseal_api_url="https://api.docuseal.test",
        http_timeout=5.0,
        max_upload_mb=10,
        ocr_mode="off",
        ocr_lang="eng",
        max_pages=None,
        log_level="WARNING",
    )


def _pdf_string(line):
    return line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


@pytest.fixture()
def text_pdf():
    """Minimal PDF whose pages carry real Helvetica text, one line per string."""
    def _make(pages):
        objects = {
            1: b"<< /Type /Catalog /Pages 2 0 R >>",
            3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        }
        kids = []
        num = 4
        for lines in pages:
            ops = ["BT", "/F1 11 Tf", "14 TL", "72 740 Td"]
            ops += [f"({_pdf_string(line)}) Tj T*" for line in lines]
            ops.append("ET")
            stream = "\n".join(ops).encode("latin-1")
            objects[num + 1] = b"<< /Length %d >>\nstream\n%s\nendstream" % (len(stream), stream)
            objects[num] = (
                b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                b"/Resources << /Font << /F1 3 0 R >> >> /Contents %d 0 R >>" % (num + 1)
            )
            kids.append(b"%d 0 R" % num)
            num += 2
        objects[2] = b"<< /Type /Pages /Kids [%s] /Count %d >>" % (b" ".join(kids), len(kids))

        out = bytearray(b"%PDF-1.4\n")
        offsets = {}
        for n in sorted(objects):
            offsets[n] = len(out)
            out += b"%d 0 obj\n%s\nendobj\n" % (n, objects[n])
        xref_at = len(out)
        size = max(objects) + 1
        out += b"xref\n0 %d\n0000000000 65535 f \n" % size
        for n in range(1, size):
            out += b"%010d 00000 n \n" % offsets[n]
        out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (size, xref_at)
        return bytes(out)

    return _make
