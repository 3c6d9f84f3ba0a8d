# fleetscore/extract/ocr.py

from __future__ import annotations

import logging
import re
from typing import List, Optional

import pytesseract
from pdf2image import convert_from_bytes, convert_from_path

from .pdf_text import ReportText

logger = logging.getLogger(__name__)


def _clean_ocr_text(s: str) -> str:
    # "inter-\nnational" -> "international"
    s = re.sub(r"-\n(\w)", r"\1", s)
    s = re.sub(r"[ \t]+", " ", s)
    s = re.sub(r"\n{3,}", "\n\n", s)
    return s.strip()


def ocr_pdf(
    pdf_path: Optional[str] = None,
    *,
    data: Optional[bytes] = None,
    dpi: int = 220,
    lang: str = "eng",
    max_pages: Optional[int] = None,
    tesseract_cmd: Optional[str] = None,
) -> ReportText:
    """
    OCR a scanned report: rasterise pages with pdf2image (poppler) and run Tesseract.

    Prerequisites: tesseract-ocr and poppler-utils on PATH.
    """
    if (pdf_path is None) == (data is None):
        raise ValueError("pass exactly one of pdf_path or data")
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    last_page = max_pages if max_pages else None
    if pdf_path is not None:
        images = convert_from_path(pdf_path, dpi=dpi, last_page=last_page)
    else:
        images = convert_from_bytes(data, dpi=dpi, last_page=last_page)

    # psm 6: a uniform block of text, which suits checklist-style reports
    tesseract_config = "--psm 6"

    page_texts: List[str] = []
    for img in images:
        t = pytesseract.image_to_string(img, lang=lang, config=tesseract_config) or ""
        page_texts.append(_clean_ocr_text(t))

    logger.info("OCR'd %d pages (lang=%s, dpi=%d)", len(images), lang, dpi)
    return ReportText(
        text="\n\n".join(page_texts).strip(),
        pages=len(images),
        source="ocr",
        meta={"ocr_pages": len(images), "dpi": dpi, "lang": lang, "engine": "tesseract", "tesseract_config": tesseract_config},
    )
