# fleetscore/rubrics/recommendations.py
"""
Recommendations derived from a scored AnalysisResult.

Category level: the 1-4 rubric score is converted to a 0-100 compliance
percentage (1.0 -> 100, 4.0 -> 0) and compared with the audit thresholds
(< 70 High/Immediate, < 85 Medium/Within 30 days).

Item level: any item scoring worse than Satisfactory (> 2.5) gets a
recommendation, High when it is Unacceptable (> 3.5).
"""

from __future__ import annotations

from typing import Dict, List

from fleetscore.rubrics import MAX_SCORE, MIN_SCORE, Priority, Recommendation
from fleetscore.rubrics.scorer import AnalysisResult, SubcategoryResult

HIGH_PRIORITY_BELOW = 70.0
MEDIUM_PRIORITY_BELOW = 85.0
IMMEDIATE = "Immediate"
WITHIN_30_DAYS = "Within 30 days"

ITEM_RECOMMENDATION_ABOVE = 2.5
ITEM_HIGH_PRIORITY_ABOVE = 3.5

# Keyed by the category and item names of the bundled fleet standards
CATEGORY_RECOMMENDATIONS: Dict[str, str] = {
    "deck": "Carry out a full deck walk-down and close out hull, mooring and cargo gear deficiencies",
    "cargo": "Inspect cargo decks, ramps and cargo systems and rectify defects before the next loading",
    "technical": "Implement enhanced maintenance schedule and address machinery and electrical issues",
    "accommodation": "Review housekeeping and insulation standards in accommodation spaces",
}
DEFAULT_CATEGORY_RECOMMENDATION = "Review and improve current practices"

ITEM_RECOMMENDATIONS: Dict[str, str] = {
    "Hull Coating": "Schedule hull coating repairs and touch up damaged areas at the next opportunity",
    "Structural Condition": "Conduct thorough hull inspection and address any structural issues",
    "Deck Covering": "Repair damaged deck covering and restore antiskid surfaces",
    "Forward Mooring": "Inspect forward mooring winches, wires and running gear and renew worn parts",
    "Aft Mooring": "Inspect aft mooring winches, wires and running gear and renew worn parts",
    "Cranes and Davits": "Inspect and maintain all cranes, davits and cargo handling gear",
    "Lifting and Lashing Points": "Renew wasted lashing points and re-certify lifting points",
    "Stern Ramp": "Survey stern ramp hinges, seals and hydraulics and rectify defects before the next port call",
    "Cargo Hydraulics": "Trace and repair hydraulic leaks and renew worn hoses",
    "Cargo Firefighting": "Verify cargo fire suppression systems are functional and properly maintained",
    "Main Engine": "Schedule comprehensive engine maintenance and performance checks",
    "Auxiliary Engines": "Schedule auxiliary engine overhauls and performance checks",
    "Emergency Generator": "Test the emergency generator under load and record the results",
    "Cables and Electrical": "Review electrical systems and ensure all safety protocols are followed",
    "Flexible Hoses": "Renew degraded flexible hoses and secure them against chafing",
    "Boundaries and Seals": "Restore watertight and fire boundary seals and test the doors",
    "Galley": "Deep clean the galley and review food hygiene routines",
    "Statutory Insulation": "Repair damaged statutory insulation and restore fire integrity",
}


def compliance_percent(score: float) -> float:
    """Map a 1-4 rubric score onto 0-100, where 100 is fully compliant (score 1.0)."""
    pct = (MAX_SCORE - score) / (MAX_SCORE - MIN_SCORE) * 100.0
    return max(0.0, min(100.0, pct))


def category_recommendation_text(category: str) -> str:
    return CATEGORY_RECOMMENDATIONS.get(category.lower(), DEFAULT_CATEGORY_RECOMMENDATION)


def item_recommendation_text(item: str) -> str:
    return ITEM_RECOMMENDATIONS.get(item, f"Review and improve {item} standards and procedures")


def recommend(analysis: AnalysisResult) -> List[Recommendation]:
    """Category-level recommendations, in category order."""
    recs: List[Recommendation] = []
    for name, cat in analysis.categories.items():
        pct = compliance_percent(cat.score)
        if pct < HIGH_PRIORITY_BELOW:
            priority, timeline = Priority.HIGH, IMMEDIATE
        elif pct < MEDIUM_PRIORITY_BELOW:
            priority, timeline = Priority.MEDIUM, WITHIN_30_DAYS
        else:
            continue
        recs.append(Recommendation(
            scope=name,
            priority=priority,
            text=category_recommendation_text(name),
            timeline=timeline,
        ))
    return recs


def recommend_items(subcategory: SubcategoryResult) -> List[Recommendation]:
    """Item-level recommendations for one subcategory."""
    recs: List[Recommendation] = []
    for item in subcategory.items:
        if item.score <= ITEM_RECOMMENDATION_ABOVE:
            continue
        recs.append(Recommendation(
            scope=item.name,
            priority=Priority.HIGH if item.score > ITEM_HIGH_PRIORITY_ABOVE else Priority.MEDIUM,
            text=item_recommendation_text(item.name),
            criteria=item.criteria,
        ))
    return recs
