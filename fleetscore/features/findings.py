# fleetscore/features/findings.py
"""
Classification of report text into good-practice and deficiency findings.

Three tiers, tried in order of precision:
1. Cue-phrase patterns over the whole text ("good practice: ...", "defect: ...")
2. The "Flagged items" section, which replaces tier 1 entirely when present
3. Line-level sentiment words, only if nothing was found by tiers 1-2
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Pattern

from fleetscore.errors import InvalidInputError
from fleetscore.features.sections import find_flagged_items

logger = logging.getLogger(__name__)

MAX_FINDINGS = 5
MAX_FLAGGED_FINDINGS = 8


@dataclass
class Findings:
    good_practices: List[str] = field(default_factory=list)
    deficiencies: List[str] = field(default_factory=list)
    source: str = "none"  # "patterns", "flagged_items", "lines" or "none"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "good_practices": list(self.good_practices),
            "deficiencies": list(self.deficiencies),
            "source": self.source,
        }


# =============================================================================
# TIER 1: CUE PHRASES
# =============================================================================

def _cue(phrase: str) -> Pattern:
    # Remainder of the line after the cue phrase and any colon/whitespace.
    # Word start, so "unsatisfactory" is not a "satisfactory" cue.
    return re.compile(r"\b" + phrase + r"[:\s]+([^\n\r]+)", re.I)


GOOD_PRACTICE_CUES: List[Pattern] = [
    _cue(r"good\s+practices?"),
    _cue(r"excellent"),
    _cue(r"satisfactory"),
    _cue(r"well\s+maintained"),
    _cue(r"properly\s+functioning"),
    _cue(r"in\s+good\s+condition"),
]

DEFICIENCY_CUES: List[Pattern] = [
    _cue(r"deficienc(?:y|ies)"),
    _cue(r"non[-\s]?conformit(?:y|ies)"),
    _cue(r"defects?"),
    _cue(r"issues?"),
    _cue(r"problems?"),
    _cue(r"poor"),
    _cue(r"damaged"),
    _cue(r"missing"),
    _cue(r"faulty"),
    _cue(r"defective"),
    _cue(r"unsatisfactory"),
    _cue(r"unacceptable"),
]

# Report-template text that looks like a finding but never is one
BOILERPLATE = (
    "deficiency identified requiring corrective action",
    "private & confidential",
)


def _is_boilerplate(s: str) -> bool:
    low = s.lower()
    return any(b in low for b in BOILERPLATE)


def _cue_matches(text: str, patterns: Iterable[Pattern]) -> List[str]:
    found: List[str] = []
    for pat in patterns:
        for m in pat.finditer(text):
            finding = m.group(1).strip()
            if len(finding) > 5 and not _is_boilerplate(finding):
                found.append(finding)
    return found


# =============================================================================
# TIER 2: FLAGGED ITEMS SECTION
# =============================================================================

_SECTION_NOISE_RE = re.compile(
    r"private\s*&\s*confidential|type\s*deficiency\s*or\s*good\s*practice|flagged\s*items",
    re.I,
)
_FRAGMENT_SPLIT_RE = re.compile("\n|•|-|–|—|;|\\.|\r")
# "Fidelio:", "Lake Tazawa:", "L.Tazawa:" and similar speaker/vessel prefixes
_NAME_PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z.\s/-]{1,40}:\s*")

# Pagination, workflow metadata and template labels from the inspection app export
STOP_WORDS = (
    "deficiency identified requiring corrective action",
    "private & confidential",
    "confidential",
    "for internal use",
    "page",
    "flagged items",
    "actions",
    "open",
    "assignee",
    "priority",
    "due:",
    "created by",
    "photo",
    "type",
    "deficiency",
    "good practice",
    "flagged",
    "items",
    "vessel",
    "date",
    "prepared by",
    "location",
    "inspection type",
    "shore",
    "complete",
)

DEFICIENCY_SHAPES: List[Pattern] = [re.compile(p, re.I) for p in (
    r"faded.*corrod.*draft.*mark",
    r"damaged.*antiskid.*paint",
    r"cargo.*vent.*fan.*stuck",
    r"torn.*down.*ceiling",
    r"no.*proper.*lashing",
    r"chain.*box",
    r"bunker.*station",
    r"stern.*ramp",
    r"draft.*mark.*stbd",
    r"lever.*stuck",
    r"slope.*way.*deck",
    r"not.*properly.*indicating.*co2",
    r"co2.*q.*ty.*level.*gauge",
    r"fan.*no.*deck.*no.*10.*11",
    r"oily.*condition.*me.*fo.*supply",
    r"circulation.*pumps.*area.*purifier",
    r"engine.*room",
)]

GOOD_PRACTICE_SHAPES: List[Pattern] = [re.compile(p, re.I) for p in (
    r"excellent.*arrangement",
    r"professional.*working",
    r"well.*done",
    r"impressed.*improvement",
    r"commend",
    r"outstanding",
)]


def _is_stop_fragment(s: str) -> bool:
    low = s.lower()
    return any(w in low for w in STOP_WORDS)


def is_deficiency_fragment(s: str) -> bool:
    return len(s) > 15 and any(p.search(s) for p in DEFICIENCY_SHAPES)


def is_good_practice_fragment(s: str) -> bool:
    return len(s) > 20 and any(p.search(s) for p in GOOD_PRACTICE_SHAPES)


def split_fragments(section_text: str) -> List[str]:
    """Break a flagged-items section into candidate sentences with name prefixes removed."""
    cleaned = _SECTION_NOISE_RE.sub("", section_text)
    fragments = []
    for part in _FRAGMENT_SPLIT_RE.split(cleaned):
        part = part.strip()
        if len(part) > 10:
            fragments.append(_NAME_PREFIX_RE.sub("", part))
    return fragments


def _dedupe(items: Iterable[str], limit: int) -> List[str]:
    return list(dict.fromkeys(items))[:limit]


def classify_flagged_items(section_text: str) -> Findings:
    good: List[str] = []
    bad: List[str] = []
    for frag in split_fragments(section_text):
        if _is_stop_fragment(frag):
            continue
        if is_deficiency_fragment(frag):
            bad.append(frag)
        elif is_good_practice_fragment(frag):
            good.append(frag)
    return Findings(
        good_practices=_dedupe(good, MAX_FLAGGED_FINDINGS),
        deficiencies=_dedupe(bad, MAX_FLAGGED_FINDINGS),
        source="flagged_items",
    )


# =============================================================================
# TIER 3: LINE SENTIMENT
# =============================================================================

# Word starts only; "unsatisfactory" and "non-functional" are not good lines
_GOOD_LINE_RE = re.compile(r"(?<![\w-])(?:good|excellent|satisfactory|proper|well|adequate|functional)", re.I)
_BAD_LINE_RE = re.compile(r"\b(?:poor|bad|damaged|missing|faulty|defective|inadequate|non-functional)", re.I)


def classify_lines(text: str) -> Findings:
    good: List[str] = []
    bad: List[str] = []
    for line in text.split("\n"):
        line = line.strip()
        if not 10 < len(line) < 200:
            continue
        # Positive vocabulary wins when a line carries both
        if _GOOD_LINE_RE.search(line):
            good.append(line)
        elif _BAD_LINE_RE.search(line):
            bad.append(line)
    return Findings(good_practices=good, deficiencies=bad, source="lines")


# =============================================================================
# ENTRY POINT
# =============================================================================

def classify_findings(text: str) -> Findings:
    """
    Split report text into good-practice and deficiency findings.

    Returns:
        Findings with at most 5 entries per bucket
    """
    if not isinstance(text, str):
        raise InvalidInputError("text", f"expected str, got {type(text).__name__}")

    findings = Findings(
        good_practices=_cue_matches(text, GOOD_PRACTICE_CUES),
        deficiencies=_cue_matches(text, DEFICIENCY_CUES),
        source="patterns",
    )

    section = find_flagged_items(text)
    if section is not None:
        logger.debug("Flagged items section found at %d-%d, overriding cue matches", section.start, section.end)
        findings = classify_flagged_items(section.text)

    if not findings.good_practices and not findings.deficiencies:
        findings = classify_lines(text)
        if not findings.good_practices and not findings.deficiencies:
            findings.source = "none"

    findings.good_practices = findings.good_practices[:MAX_FINDINGS]
    findings.deficiencies = findings.deficiencies[:MAX_FINDINGS]
    return findings
