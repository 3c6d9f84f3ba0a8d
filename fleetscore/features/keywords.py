# fleetscore/features/keywords.py

from __future__ import annotations

import re

from dataclasses import dataclass
from typing import Dict, List, Pattern, Sequence, Tuple


@dataclass
class KeywordSignals:
    """
    Sentiment lexicon counts for a piece of text.
    """
    bucket_hits: Dict[str, int]          # total hits per bucket
    term_hits: Dict[str, Dict[str, int]] # per-bucket per-term counts

    @property
    def good(self) -> int:
        return self.bucket_hits.get(GOOD_PRACTICE, 0)

    @property
    def deficiency(self) -> int:
        return self.bucket_hits.get(DEFICIENCY, 0)


GOOD_PRACTICE = "good_practice"
DEFICIENCY = "deficiency"

# Generic condition vocabulary used by the item scorer. Terms match at the
# start of a word and absorb inflections ("leaking" counts as "leak").
SENTIMENT_BUCKETS: Dict[str, List[str]] = {
    GOOD_PRACTICE: [
        "excellent", "good", "proper", "adequate", "functional", "operational",
        "well maintained", "fully operational", "clean", "in good condition",
        "satisfactory", "working", "ok", "okay",
    ],
    DEFICIENCY: [
        "poor", "inadequate", "non-functional", "defective", "missing", "expired",
        "damaged", "broken", "faulty", "worn", "rust", "leak", "unsatisfactory",
        "unacceptable", "bad", "not working",
    ],
}


def compile_lexicon(buckets: Dict[str, List[str]]) -> Tuple[Pattern, Dict[str, str]]:
    """
    One alternation over every bucket, longest term first.

    Scanning is left to right without overlap, so "not working",
    "non-functional" and "unsatisfactory" consume their text before
    "working", "functional" or "satisfactory" can match inside it.
    Returns the pattern and a term -> bucket lookup.
    """
    owner: Dict[str, str] = {}
    for bucket, terms in buckets.items():
        for term in terms:
            owner.setdefault(term.lower(), bucket)
    alternation = "|".join(re.escape(t) for t in sorted(owner, key=len, reverse=True))
    return re.compile(rf"\b({alternation})\w*"), owner


_DEFAULT_LEXICON = compile_lexicon(SENTIMENT_BUCKETS)


def count_sentiment(text: str, *, buckets: Dict[str, List[str]] = SENTIMENT_BUCKETS) -> KeywordSignals:
    """
    Count good-practice and deficiency vocabulary in text.

    Each word is counted at most once, for the longest term it starts with.
    Callers pass a whole corpus or a single context window.
    """
    t = (text or "").lower()
    pattern, owner = _DEFAULT_LEXICON if buckets is SENTIMENT_BUCKETS else compile_lexicon(buckets)

    term_hits: Dict[str, Dict[str, int]] = {bucket: {} for bucket in buckets}
    for m in pattern.finditer(t):
        term = m.group(1)
        hits = term_hits[owner[term]]
        hits[term] = hits.get(term, 0) + 1

    bucket_hits = {bucket: sum(hits.values()) for bucket, hits in term_hits.items()}
    return KeywordSignals(bucket_hits=bucket_hits, term_hits=term_hits)


def keyword_presence(text: str, keywords: Sequence[str]) -> List[str]:
    """Item keywords that occur at least once in (lower-cased) text."""
    t = (text or "").lower()
    return [k for k in keywords if k and k.lower() in t]
