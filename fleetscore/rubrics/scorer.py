# fleetscore/rubrics/scorer.py
"""
Rubric scoring of extracted report data against a fleet standards tree.

Scores use the 1-4 rubric scale (1 = Good, 4 = Unacceptable). The whole tree is
scored once, bottom-up, into an AnalysisResult; status labels, recommendations
and evidence snippets are all read from that result rather than recomputed.

Item scoring:
1. Keyword presence decides whether the item is mentioned at all (else 2.0)
2. Document-wide good/deficiency vocabulary sets the base score
3. Vocabulary within 60 characters of the item's keywords shifts it
4. Scores >= 3.0 carry the item's improvement action, <= 1.5 its praise comment
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fleetscore.errors import InvalidInputError
from fleetscore.extract.fields import Clock, ExtractedData
from fleetscore.features.keywords import KeywordSignals, count_sentiment, keyword_presence
from fleetscore.rubrics import (
    DEFAULT_SCORE, MAX_SCORE, MIN_SCORE,
    Recommendation, Status, assess_status, clamp_score,
)
from fleetscore.rubrics.standards import (
    CategoryDefinition, ItemDefinition, StandardsTree, SubcategoryDefinition,
)

logger = logging.getLogger(__name__)

SENTIMENT_STEP = 0.2
CONTEXT_STEP = 0.25
CONTEXT_MIN_ADJUST = -1.0
CONTEXT_MAX_ADJUST = 1.5
MAX_BASE_SCORE = 3.9
CONTEXT_CHARS = 60
SNIPPET_CHARS = 80
SNIPPETS_PER_KEYWORD = 2
SNIPPETS_PER_ITEM = 3

IMPROVEMENT_THRESHOLD = 3.0
PRAISE_THRESHOLD = 1.5

DEFAULT_IMPROVEMENT_ACTION = (
    "Implement regular maintenance schedule, conduct thorough inspection, "
    "address identified issues, establish quality control measures"
)
DEFAULT_PRAISE_COMMENT = (
    "Excellent performance! This area demonstrates outstanding standards and attention to detail."
)


# =============================================================================
# RESULT MODEL
# =============================================================================

@dataclass
class ItemScore:
    name: str
    score: float
    status: Status
    weight: float
    criteria: str
    improvement_action: Optional[str] = None
    praise_comment: Optional[str] = None
    findings: List[str] = field(default_factory=list)  # evidence snippets
    matched_keywords: List[str] = field(default_factory=list)
    context_good: int = 0
    context_deficiency: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 4),
            "status": self.status.value,
            "weight": self.weight,
            "criteria": self.criteria,
            "improvement_action": self.improvement_action,
            "praise_comment": self.praise_comment,
            "findings": self.findings[:SNIPPETS_PER_ITEM],
            "matched_keywords": self.matched_keywords,
            "context": {"good": self.context_good, "deficiency": self.context_deficiency},
        }


@dataclass
class SubcategoryResult:
    name: str
    score: float
    status: Status
    weight: float
    items: List[ItemScore]
    recommendations: List[Recommendation] = field(default_factory=list)

    def item(self, name: str) -> Optional[ItemScore]:
        return next((i for i in self.items if i.name == name), None)


@dataclass
class CategoryResult:
    name: str
    score: float
    status: Status
    weight: float
    subcategories: List[SubcategoryResult]

    def subcategory(self, name: str) -> Optional[SubcategoryResult]:
        return next((s for s in self.subcategories if s.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 4),
            "status": self.status.value,
            "weight": self.weight,
            "subcategory_details": {
                s.name: {
                    "score": round(s.score, 4),
                    "status": s.status.value,
                    "weight": s.weight,
                    "recommendations": [r.to_dict() for r in s.recommendations],
                }
                for s in self.subcategories
            },
            "item_scores": {
                s.name: {i.name: i.to_dict() for i in s.items}
                for s in self.subcategories
            },
        }


@dataclass
class AnalysisResult:
    categories: Dict[str, CategoryResult]
    overall_score: float
    overall_status: Status
    report_date: str
    recommendations: List[Recommendation] = field(default_factory=list)
    extracted: Optional[ExtractedData] = None

    def item(self, name: str) -> Optional[ItemScore]:
        """First item with this name anywhere in the tree."""
        for cat in self.categories.values():
            for sub in cat.subcategories:
                found = sub.item(name)
                if found is not None:
                    return found
        return None

    def iter_items(self) -> Iterable[Tuple[CategoryResult, SubcategoryResult, ItemScore]]:
        for cat in self.categories.values():
            for sub in cat.subcategories:
                for item in sub.items:
                    yield cat, sub, item

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extracted_data": self.extracted.to_dict() if self.extracted else None,
            "analysis": {name: c.to_dict() for name, c in self.categories.items()},
            "overall_score": round(self.overall_score, 4),
            "overall_status": self.overall_status.value,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "report_date": self.report_date,
        }


# =============================================================================
# CORPUS
# =============================================================================

@dataclass
class ScoringContext:
    """Per-analysis text corpus, built once and shared by every item."""
    all_text: str        # lower-cased, space-joined (scoring)
    snippet_text: str    # lower-cased, newline-joined (evidence snippets)
    sentiment: KeywordSignals


def build_context(data: ExtractedData) -> ScoringContext:
    """
    Corpus = good practices + deficiencies + observations + full report text.
    The full text keeps keyword recall when no findings were classified.
    """
    parts: List[str] = [
        *data.findings.good_practices,
        *data.findings.deficiencies,
        *data.observations,
    ]
    if data.full_text:
        parts.append(data.full_text)
    all_text = " ".join(parts).lower()
    return ScoringContext(
        all_text=all_text,
        snippet_text="\n".join(parts).lower(),
        sentiment=count_sentiment(all_text),
    )


def _keyword_alternation(keywords: Sequence[str]) -> str:
    return "|".join(re.escape(k.lower()) for k in keywords if k)


def context_windows(text: str, keywords: Sequence[str], *, width: int = CONTEXT_CHARS) -> List[str]:
    """
    Text on either side (up to `width` chars, same line) of each keyword occurrence.
    Windows do not overlap; the keyword itself is excluded.
    """
    alternation = _keyword_alternation(keywords)
    if not alternation or not text:
        return []
    regex = re.compile(rf"([^\n\r]{{0,{width}}})({alternation})([^\n\r]{{0,{width}}})", re.I)
    return [f"{m.group(1)} {m.group(3)}" for m in regex.finditer(text)]


def evidence_snippets(
    text: str,
    keywords: Sequence[str],
    *,
    width: int = SNIPPET_CHARS,
    per_keyword: int = SNIPPETS_PER_KEYWORD,
    limit: int = SNIPPETS_PER_ITEM,
) -> List[str]:
    """Short passages around keyword hits, for tracing a score back to the report."""
    hits: List[str] = []
    for kw in keywords:
        k = kw.lower()
        if not k:
            continue
        regex = re.compile(rf"([^\n\r]{{0,{width}}}){re.escape(k)}([^\n\r]{{0,{width}}})", re.I)
        for count, m in enumerate(regex.finditer(text)):
            if count >= per_keyword:
                break
            hits.append(" ".join(f"{m.group(1)} {k} {m.group(2)}".split()))
    return hits[:limit]


# =============================================================================
# SCORING
# =============================================================================

def weighted_mean(pairs: Iterable[Tuple[float, float]], *, default: float = DEFAULT_SCORE) -> float:
    """Sum(score * weight) / sum(weight); `default` when there is no weight at all."""
    total = 0.0
    total_weight = 0.0
    for score, weight in pairs:
        total += score * weight
        total_weight += weight
    return total / total_weight if total_weight > 0 else default


def base_score(good: int, deficiency: int) -> float:
    if good > deficiency:
        return max(MIN_SCORE, DEFAULT_SCORE - good * SENTIMENT_STEP)
    if deficiency > good:
        return min(MAX_BASE_SCORE, DEFAULT_SCORE + deficiency * SENTIMENT_STEP)
    return DEFAULT_SCORE


def context_adjustment(context_good: int, context_deficiency: int) -> float:
    delta = (context_deficiency - context_good) * CONTEXT_STEP
    return min(CONTEXT_MAX_ADJUST, max(CONTEXT_MIN_ADJUST, delta))


def score_item(item: ItemDefinition, ctx: ScoringContext) -> ItemScore:
    matched = keyword_presence(ctx.all_text, item.keywords)

    score = DEFAULT_SCORE
    context_good = 0
    context_def = 0
    if matched:
        score = base_score(ctx.sentiment.good, ctx.sentiment.deficiency)
        for window in context_windows(ctx.all_text, item.keywords):
            local = count_sentiment(window)
            context_good += local.good
            context_def += local.deficiency
        score += context_adjustment(context_good, context_def)

    score = clamp_score(score)

    improvement_action = None
    praise_comment = None
    if score >= IMPROVEMENT_THRESHOLD:
        improvement_action = item.improvement_action or DEFAULT_IMPROVEMENT_ACTION
    elif score <= PRAISE_THRESHOLD:
        praise_comment = item.praise_comment or DEFAULT_PRAISE_COMMENT

    return ItemScore(
        name=item.name,
        score=score,
        status=assess_status(score),
        weight=item.weight,
        criteria=item.criteria,
        improvement_action=improvement_action,
        praise_comment=praise_comment,
        findings=evidence_snippets(ctx.snippet_text, item.keywords),
        matched_keywords=matched,
        context_good=context_good,
        context_deficiency=context_def,
    )


def score_subcategory(subcat: SubcategoryDefinition, ctx: ScoringContext) -> SubcategoryResult:
    items = [score_item(item, ctx) for item in subcat.items]
    score = weighted_mean((i.score, i.weight) for i in items)
    return SubcategoryResult(
        name=subcat.name,
        score=score,
        status=assess_status(score),
        weight=subcat.weight,
        items=items,
    )


def score_category(category: CategoryDefinition, ctx: ScoringContext) -> CategoryResult:
    subcats = [score_subcategory(s, ctx) for s in category.subcategories]
    score = weighted_mean((s.score, s.weight) for s in subcats)
    return CategoryResult(
        name=category.name,
        score=score,
        status=assess_status(score),
        weight=category.weight,
        subcategories=subcats,
    )


def score_standards(
    tree: StandardsTree,
    data: ExtractedData,
    *,
    clock: Optional[Clock] = None,
) -> AnalysisResult:
    """
    Score every item, subcategory and category of `tree` against `data`.

    Returns:
        AnalysisResult without recommendations (see recommendations.recommend)

    Raises:
        InvalidInputError: tree or data is of the wrong type
    """
    if not isinstance(tree, StandardsTree):
        raise InvalidInputError("tree", f"expected StandardsTree, got {type(tree).__name__}")
    if not isinstance(data, ExtractedData):
        raise InvalidInputError("data", f"expected ExtractedData, got {type(data).__name__}")

    ctx = build_context(data)
    categories = {c.name: score_category(c, ctx) for c in tree.categories}
    overall = clamp_score(weighted_mean((c.score, c.weight) for c in categories.values()))

    logger.debug(
        "Scored %d categories (good=%d, deficiency=%d document-wide): overall %.3f",
        len(categories), ctx.sentiment.good, ctx.sentiment.deficiency, overall,
    )

    now = (clock or datetime.now)()
    return AnalysisResult(
        categories=categories,
        overall_score=overall,
        overall_status=assess_status(overall),
        report_date=now.isoformat(),
        extracted=data,
    )
