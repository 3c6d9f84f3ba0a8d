# fleetscore/features/sections.py

from __future__ import annotations

import re

from dataclasses import dataclass
from typing import Optional, Pattern


@dataclass
class Section:
    """
    A region of report text, from its heading up to the next terminating heading.
    """
    name: str
    text: str
    start: int
    end: int


def _section_pattern(heading: str, terminators: str) -> Pattern:
    # Lazy body so the first terminating heading closes the section;
    # \Z lets the section run to end of text.
    return re.compile(rf"{heading}.*?(?={terminators}|\Z)", re.I | re.S)


_FLAGGED_ITEMS_RE = _section_pattern(
    r"flagged\s+items",
    r"condition\s+assessment|scoring",
)


def find_flagged_items(text: str) -> Optional[Section]:
    """
    Locate the "Flagged items" section of an inspection report.

    The section starts at the first "Flagged items" heading and stops at the
    next "Condition assessment" or "Scoring" heading (or end of text).
    Returns None when the report has no such section.
    """
    if not text:
        return None
    m = _FLAGGED_ITEMS_RE.search(text)
    if not m:
        return None
    return Section(name="flagged_items", text=m.group(0), start=m.start(), end=m.end())
