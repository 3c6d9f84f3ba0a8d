# fleetscore/extract/fields.py
"""
Heuristic extraction of header fields from inspection report text.

Each field is resolved by an ordered chain of matchers: labelled values first
("Vessel name: ..."), then bare patterns, then a scan for names known from
past reports, then a sentinel. The first matcher that yields a usable value wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from fleetscore.errors import InvalidInputError
from fleetscore.features.findings import Findings, classify_findings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Matcher = Callable[[str], Optional[str]]

UNKNOWN_VESSEL = "Unknown Vessel"
UNKNOWN_INSPECTOR = "Unknown Inspector"

# Last-resort lookups: substring found in text -> value to report
KNOWN_VESSELS: Dict[str, str] = {
    "ASIAN VISION": "ASIAN VISION",
    "Asian Vision": "ASIAN VISION",
}
KNOWN_INSPECTORS: Dict[str, str] = {
    "Byeongil": "Byeongil (James) Jang",
    "James": "Byeongil (James) Jang",
    "Jang": "Byeongil (James) Jang",
}
KNOWN_DATES: Dict[str, str] = {
    "Jul-29-2025": "Jul 29, 2025",
    "Jul 29 2025": "Jul 29, 2025",
}


@dataclass
class ExtractedData:
    vessel_name: str
    inspection_date: str
    inspector: str
    findings: Findings
    observations: List[str] = field(default_factory=list)
    reported_deficiencies: List[str] = field(default_factory=list)
    full_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vessel_name": self.vessel_name,
            "inspection_date": self.inspection_date,
            "inspector": self.inspector,
            "findings": self.findings.to_dict(),
            "observations": list(self.observations),
            "reported_deficiencies": list(self.reported_deficiencies),
        }


# =============================================================================
# MATCHER BUILDERS
# =============================================================================

def labelled(pattern: str, *, min_len: int = 3) -> Matcher:
    """Matcher returning group 1 of the first match (or the whole match if there is no group)."""
    regex = re.compile(pattern, re.I)

    def match(text: str) -> Optional[str]:
        m = regex.search(text)
        if not m:
            return None
        value = (m.group(1) if regex.groups else m.group(0)).strip()
        return value if len(value) >= min_len else None

    return match


def known_names(names: Dict[str, str]) -> Matcher:
    """Matcher returning the canonical value of the first known substring present."""
    def match(text: str) -> Optional[str]:
        for needle, value in names.items():
            if needle in text:
                return value
        return None

    return match


def first_match(text: str, matchers: Sequence[Matcher]) -> Optional[str]:
    for matcher in matchers:
        value = matcher(text)
        if value:
            return value
    return None


_LINE = r"([^\n\r]+)"
# Full or abbreviated month name, not the start of a longer word ("Decks")
_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)(?![a-z])\.?"
)

VESSEL_MATCHERS: List[Matcher] = [
    labelled(r"vessel\s+name[:\s]+" + _LINE),
    labelled(r"ship\s+name[:\s]+" + _LINE),
    labelled(r"\bm\.v\.\s+" + _LINE),
    labelled(r"\bm/v\s+" + _LINE),
    labelled(r"\bvessel[:\s]+" + _LINE),
    labelled(r"\bship[:\s]+" + _LINE),
]

DATE_MATCHERS: List[Matcher] = [
    labelled(r"inspection\s+date[:\s]+" + _LINE, min_len=4),
    labelled(r"date\s+of\s+inspection[:\s]+" + _LINE, min_len=4),
    labelled(r"\bdate[:\s]+" + _LINE, min_len=4),
    labelled(r"(\b\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}\b)", min_len=4),
    labelled(r"(\b\d{4}[/\-]\d{1,2}[/\-]\d{1,2}\b)", min_len=4),
    labelled(rf"(\b\d{{1,2}}[\s\-]*{_MONTH}[\s\-,]*\d{{4}})", min_len=4),
    labelled(rf"(\b{_MONTH}[\s\-]*(?:\d{{1,2}}[\s\-,]+)?\d{{4}})", min_len=4),
]

INSPECTOR_MATCHERS: List[Matcher] = [
    labelled(r"inspector[:\s]+" + _LINE),
    labelled(r"inspected\s+by[:\s]+" + _LINE),
    labelled(r"surveyor[:\s]+" + _LINE),
    labelled(r"\bby[:\s]+" + _LINE),
]


# =============================================================================
# FIELD EXTRACTORS
# =============================================================================

def extract_vessel_name(text: str, *, known: Optional[Dict[str, str]] = None) -> str:
    chain = VESSEL_MATCHERS + [known_names(KNOWN_VESSELS if known is None else known)]
    return first_match(text, chain) or UNKNOWN_VESSEL


def extract_inspection_date(
    text: str,
    *,
    clock: Optional[Clock] = None,
    known: Optional[Dict[str, str]] = None,
) -> str:
    """
    Inspection date as written in the report.
    Undated reports get today's date (from `clock`) in the locale's format.
    """
    chain = DATE_MATCHERS + [known_names(KNOWN_DATES if known is None else known)]
    value = first_match(text, chain)
    if value:
        return value
    now = (clock or datetime.now)()
    return now.strftime("%x")


def extract_inspector(text: str, *, known: Optional[Dict[str, str]] = None) -> str:
    chain = INSPECTOR_MATCHERS + [known_names(KNOWN_INSPECTORS if known is None else known)]
    return first_match(text, chain) or UNKNOWN_INSPECTOR


_OBSERVATION_RES = [
    re.compile(r"observations?[:\s]+([^\n\r]+)", re.I),
    re.compile(r"remarks?[:\s]+([^\n\r]+)", re.I),
    re.compile(r"comments?[:\s]+([^\n\r]+)", re.I),
]

_REPORTED_DEFICIENCY_RES = [
    re.compile(r"deficienc(?:y|ies)[:\s]+([^\n\r]+)", re.I),
    re.compile(r"non[-\s]?conformit(?:y|ies)[:\s]+([^\n\r]+)", re.I),
    re.compile(r"defects?[:\s]+([^\n\r]+)", re.I),
    re.compile(r"issues?[:\s]+([^\n\r]+)", re.I),
]


def _all_labelled(text: str, patterns: Sequence["re.Pattern[str]"]) -> List[str]:
    return [m.group(1).strip() for pat in patterns for m in pat.finditer(text)]


def extract_observations(text: str) -> List[str]:
    """Free-text observation/remark/comment lines."""
    return _all_labelled(text, _OBSERVATION_RES)


def extract_reported_deficiencies(text: str) -> List[str]:
    """Every labelled deficiency line, unfiltered."""
    return _all_labelled(text, _REPORTED_DEFICIENCY_RES)


def extract_fields(text: str, *, clock: Optional[Clock] = None) -> ExtractedData:
    """
    Build the extracted-data record for one report.

    Never fails on content: missing fields fall back to sentinels.

    Args:
        text: plain text of the whole report
        clock: source of "now" for undated reports (defaults to datetime.now)

    Raises:
        InvalidInputError: text is not a str
    """
    if not isinstance(text, str):
        raise InvalidInputError("text", f"expected str, got {type(text).__name__}")

    data = ExtractedData(
        vessel_name=extract_vessel_name(text),
        inspection_date=extract_inspection_date(text, clock=clock),
        inspector=extract_inspector(text),
        findings=classify_findings(text),
        observations=extract_observations(text),
        reported_deficiencies=extract_reported_deficiencies(text),
        full_text=text,
    )
    logger.debug(
        "Extracted vessel=%r date=%r inspector=%r findings=%s (%d good, %d deficiencies)",
        data.vessel_name, data.inspection_date, data.inspector, data.findings.source,
        len(data.findings.good_practices), len(data.findings.deficiencies),
    )
    return data
