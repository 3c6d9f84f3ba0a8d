# fleetscore/pipeline.py
"""
End-to-end analysis of one inspection report:
raw text -> extracted fields + findings -> scored standards tree -> recommendations.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fleetscore.errors import InvalidInputError
from fleetscore.extract.fields import Clock, extract_fields
from fleetscore.rubrics.recommendations import recommend, recommend_items
from fleetscore.rubrics.scorer import AnalysisResult, score_standards
from fleetscore.rubrics.standards import StandardsTree

logger = logging.getLogger(__name__)


def analyze(
    tree: StandardsTree,
    text: str,
    *,
    clock: Optional[Clock] = None,
) -> AnalysisResult:
    """
    Analyze report text against a standards tree.

    Args:
        tree: standards tree (shared, never modified)
        text: plain text of the report, already extracted from the PDF
        clock: source of "now" for undated reports and the report date

    Raises:
        InvalidInputError: before any work, if tree or text is of the wrong type
    """
    if not isinstance(tree, StandardsTree):
        raise InvalidInputError("tree", f"expected StandardsTree, got {type(tree).__name__}")
    if not isinstance(text, str):
        raise InvalidInputError("text", f"expected str, got {type(text).__name__}")

    clock = clock or datetime.now

    data = extract_fields(text, clock=clock)
    result = score_standards(tree, data, clock=clock)

    for cat in result.categories.values():
        for sub in cat.subcategories:
            sub.recommendations = recommend_items(sub)
    result.recommendations = recommend(result)

    logger.info(
        "Analyzed report for %s (%s): overall %.2f %s, %d recommendations",
        data.vessel_name, data.inspection_date, result.overall_score,
        result.overall_status.value, len(result.recommendations),
    )
    return result
