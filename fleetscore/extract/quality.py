# fleetscore/extract/quality.py
"""
Is the PDF text layer of an inspection report worth scoring?

Reports exported from the inspection app carry a full text layer. Scanned or
photographed reports come back in one of three shapes:

- no text layer at all
- a header only (the stamped vessel name and page numbers, a few dozen chars)
- symbol noise from signature blocks and form borders

Any of these sends the report to ocr_pdf.
"""

from __future__ import annotations

import re

from dataclasses import dataclass
from typing import Any, Dict

NO_TEXT_LAYER = "no_text_layer"
HEADER_ONLY = "header_only"
SYMBOL_NOISE = "symbol_noise"
USABLE = "ok"

_LETTER_RE = re.compile(r"[A-Za-z]")
_WORD_RE = re.compile(r"[A-Za-z]{2,}")


@dataclass
class TextQuality:
    ok: bool
    reason: str
    metrics: Dict[str, Any]


def text_quality_ok(
    text: str,
    *,
    min_chars: int = 200,
    min_letter_ratio: float = 0.25,
) -> TextQuality:
    stripped = (text or "").strip()
    if not stripped:
        return TextQuality(ok=False, reason=NO_TEXT_LAYER, metrics={"chars": 0, "words": 0, "letter_ratio": 0.0})

    chars = len(stripped)
    letter_ratio = len(_LETTER_RE.findall(stripped)) / chars
    metrics = {
        "chars": chars,
        "words": len(_WORD_RE.findall(stripped)),
        "letter_ratio": round(letter_ratio, 4),
    }

    # Checked in this order: a short header is reported as such even if noisy
    if chars < min_chars:
        reason = HEADER_ONLY
    elif letter_ratio < min_letter_ratio:
        reason = SYMBOL_NOISE
    else:
        reason = USABLE
    return TextQuality(ok=reason == USABLE, reason=reason, metrics=metrics)
