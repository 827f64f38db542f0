import pytest

from tagsign.extractors import io_docs
from tagsign.extractors.errors import ExtractorFault, NoTagsFound, UnsupportedFormat
from tagsign.extractors.io_docs import docx_text, pdf_text
from tagsign.extractors.models import TextExtraction
from tagsign.extractors.patterns import ERROR_MESSAGES
from tagsign.extractors.pipeline import detect_format, extract_document


def _tag_text(n):
    return " ".join(f"{{{{field_{i}}}}}" for i in range(n))


def test_detect_format_prefers_content_type_then_extension():
    assert detect_format("contract.bin", "application/pdf") == "pdf"
    assert detect_format("contract.docx", "application/octet-stream") == "docx"
    assert detect_format("CONTRACT.PDF") == "pdf"
    with pytest.raises(UnsupportedFormat):
        detect_format("notes.txt", "text/plain")


@pytest.mark.parametrize("filename, content_type", [
    ("legacy.doc", "application/msword"),
    ("legacy.doc", "application/octet-stream"),
    (None, "application/msword"),
])
def test_legacy_word_files_are_unsupported(filename, content_type):
    with pytest.raises(UnsupportedFormat):
        detect_format(filename, content_type)


def test_docx_document_yields_fields_with_estimated_pages(make_docx):
    data = make_docx(
        ["Hello {{client_name}} please sign {{client_signature}}", "Dated {{contract_date}}"],
        table_rows=[["Provider", "{{provider_signature}}"]],
    )
    result = extract_document(data, "docx")

    assert result.success
    assert result.file_type == "docx"
    assert result.page_count == 1
    assert [f.name for f in result.fields] == [
        "client_name", "client_signature", "contract_date", "provider_signature",
    ]
    assert result.fields[3].role == "Service Provider"
    assert all(len(f.areas) == 1 for f in result.fields)


def test_docx_text_has_no_page_count(make_docx):
    extraction = docx_text(make_docx(["{{a}}"]))
    assert extraction.page_count is None
    assert "{{a}}" in extraction.text


def test_no_tags_returns_failure_with_debug(make_docx):
    data = make_docx(["This contract has no placeholders at all."])
    result = extract_document(data, "docx")

    assert result.success is False
    assert result.fields == []
    assert result.error == ERROR_MESSAGES["NO_TAGS_FOUND"]
    assert result.debug["textLength"] >= len("This contract has no placeholders at all.")
    assert "This contract" in result.debug["textPreview"]
    with pytest.raises(NoTagsFound):
        result.raise_for_status()

    body = result.to_dict()
    assert body["success"] is False
    assert body["debug"]["hasText"] is True


def test_blank_pdf_reports_page_count_and_no_tags(blank_pdf):
    data = blank_pdf(pages=2)
    extraction = pdf_text(data, ocr="off")
    assert extraction.page_count == 2
    assert extraction.text.strip() == ""

    result = extract_document(data, "pdf", ocr="off")
    assert result.success is False
    assert result.file_type == "pdf"


def test_pdf_text_layer_yields_fields_in_order(text_pdf):
    data = text_pdf([
        ["Service agreement", "Provider: {{provider_signature}}", "Client: {{client_signature}}"],
        ["Signed on {{contract_date}}", "Again {{client_signature}}"],
    ])
    extraction = pdf_text(data, ocr="off")
    assert extraction.page_count == 2
    assert "{{contract_date}}" in extraction.text

    result = extract_document(data, "pdf", ocr="off")

    assert result.success
    assert result.file_type == "pdf"
    assert result.page_count == 2
    assert [f.name for f in result.fields] == ["provider_signature", "client_signature", "contract_date"]
    assert [f.type for f in result.fields] == ["signature", "signature", "date"]
    assert [f.role for f in result.fields] == ["Service Provider", "Client", "First Party"]


def test_pdf_text_layer_pages_are_clamped(text_pdf):
    data = text_pdf([[f"Line {i}: {{{{field_{i}}}}}" for i in range(40)]])
    result = extract_document(data, "pdf", ocr="off")

    assert result.success
    assert result.page_count == 1
    assert len(result.fields) == 40
    assert {f.areas[0].page for f in result.fields} == {1}


def test_ocr_uses_given_language_and_page_cap(blank_pdf, monkeypatch):
    calls = []

    def fake_ocr(img, lang=None, config=None):
        calls.append(lang)
        return "Sign {{client_signature}}"

    monkeypatch.setattr(io_docs.pytesseract, "image_to_string", fake_ocr)
    result = extract_document(blank_pdf(pages=3), "pdf", ocr="force", lang="deu", max_pages=1)

    assert calls == ["deu"]
    assert result.success
    assert result.page_count == 3
    assert result.fields[0].name == "client_signature"


def test_ocr_failure_is_recorded_not_raised(blank_pdf, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("tesseract missing")

    monkeypatch.setattr(io_docs.pytesseract, "image_to_string", boom)
    extraction = pdf_text(blank_pdf(), ocr="auto")

    assert extraction.page_count == 1
    assert "tesseract missing" in extraction.info["ocr_error"]


def test_pdf_pages_are_clamped_to_real_page_count(monkeypatch):
    monkeypatch.setitem(
        io_docs.EXTRACTORS, "pdf",
        lambda data, **kw: TextExtraction(text=_tag_text(40), page_count=1),
    )
    result = extract_document(b"%PDF", "pdf")

    assert result.success
    assert result.page_count == 1
    assert len(result.fields) == 40
    assert {f.areas[0].page for f in result.fields} == {1}


def test_docx_pages_are_not_clamped(monkeypatch):
    monkeypatch.setitem(
        io_docs.EXTRACTORS, "docx",
        lambda data, **kw: TextExtraction(text=_tag_text(40), page_count=None),
    )
    result = extract_document(b"PK", "docx")

    assert result.page_count == 2
    assert result.fields[-1].areas[0].page == 2


def test_corrupt_bytes_raise_extractor_fault():
    with pytest.raises(ExtractorFault):
        extract_document(b"definitely not a pdf", "pdf")
    with pytest.raises(ExtractorFault):
        extract_document(b"definitely not a docx", "docx")


def test_unknown_format_is_rejected():
    with pytest.raises(UnsupportedFormat):
        extract_document(b"...", "odt")


def test_result_dict_shape(make_docx):
    result = extract_document(make_docx(["{{amt;type=number;default_value=100}}"]), "docx")
    body = result.to_dict()

    assert body["success"] is True
    assert body["pageCount"] == 1
    assert body["fileType"] == "docx"
    field = body["fields"][0]
    assert field["originalTag"] == "{{amt;type=number;default_value=100}}"
    assert field["defaultValue"] == "100"
    assert field["areas"] == [{"x": 0.10, "y": 0.05, "w": 0.35, "h": 0.04, "page": 1}]
