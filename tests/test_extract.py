# tests/test_extract.py

import fitz
import pytest

from fleetscore.extract.pdf_text import extract_pdf_text
from fleetscore.extract.quality import HEADER_ONLY, NO_TEXT_LAYER, SYMBOL_NOISE, USABLE, text_quality_ok


def _write_pdf(pages):
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for n, line in enumerate(lines):
            page.insert_text((40, 60 + 18 * n), line, fontsize=10)
    data = doc.tobytes()
    doc.close()
    return data


def test_text_layer_from_bytes_and_path(tmp_path):
    data = _write_pdf([["Vessel Name: ASIAN VISION"], ["Inspector: Byeongil (James) Jang"]])
    from_bytes = extract_pdf_text(data=data)
    assert from_bytes.pages == 2
    assert from_bytes.source == "pdf_text"
    assert from_bytes.lines == ["Vessel Name: ASIAN VISION", "Inspector: Byeongil (James) Jang"]

    path = tmp_path / "report.pdf"
    path.write_bytes(data)
    first_page = extract_pdf_text(str(path), max_pages=1)
    assert first_page.lines == ["Vessel Name: ASIAN VISION"]
    assert first_page.meta == {"extracted_pages": 1, "total_pages": 2, "engine": "pymupdf"}


def test_exactly_one_source_required():
    with pytest.raises(ValueError):
        extract_pdf_text()
    with pytest.raises(ValueError):
        extract_pdf_text("report.pdf", data=b"%PDF")


@pytest.mark.parametrize("text,ok,reason", [
    ("", False, NO_TEXT_LAYER),
    ("  \n\n ", False, NO_TEXT_LAYER),
    ("ASIAN VISION  Page 1 of 4", False, HEADER_ONLY),
    ("12/03 - 45.6 | " * 20, False, SYMBOL_NOISE),
    ("Deck covering in good condition, no rust observed. " * 5, True, USABLE),
])
def test_text_quality(text, ok, reason):
    quality = text_quality_ok(text)
    assert quality.ok is ok
    assert quality.reason == reason
