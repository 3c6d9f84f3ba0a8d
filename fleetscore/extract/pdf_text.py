# fleetscore/extract/pdf_text.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


@dataclass
class ReportText:
    """
    Plain text of an inspection report, as handed to the analysis core.
    """
    text: str
    pages: int
    source: str  # "pdf_text" or "ocr"
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def lines(self) -> List[str]:
        return [ln.strip() for ln in self.text.splitlines() if ln.strip()]


def extract_pdf_text(
    pdf_path: Optional[str] = None,
    *,
    data: Optional[bytes] = None,
    max_pages: Optional[int] = None,
    join_pages_with: str = "\n\n",
) -> ReportText:
    """
    Extract the text layer of a PDF with PyMuPDF.

    Pass either a file path or the raw bytes of an upload. Scanned reports have
    little or no text layer; check the result with text_quality_ok and fall
    back to ocr_pdf.
    """
    if (pdf_path is None) == (data is None):
        raise ValueError("pass exactly one of pdf_path or data")

    doc = fitz.open(pdf_path) if pdf_path is not None else fitz.open(stream=data, filetype="pdf")
    try:
        total_pages = doc.page_count
        n = total_pages if max_pages is None else min(max_pages, total_pages)
        page_texts = [doc.load_page(i).get_text("text") or "" for i in range(n)]
    finally:
        doc.close()

    logger.debug("Extracted text layer from %d/%d pages", n, total_pages)
    return ReportText(
        text=join_pages_with.join(page_texts).strip(),
        pages=total_pages,
        source="pdf_text",
        meta={"extracted_pages": n, "total_pages": total_pages, "engine": "pymupdf"},
    )
