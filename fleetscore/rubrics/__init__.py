# fleetscore/rubrics/__init__.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# Rubric scale: 1 = Good ... 4 = Unacceptable
MIN_SCORE = 1.0
MAX_SCORE = 4.0
DEFAULT_SCORE = 2.0


class Status(str, Enum):
    GOOD = "Good"
    SATISFACTORY = "Satisfactory"
    UNSATISFACTORY = "Unsatisfactory"
    UNACCEPTABLE = "Unacceptable"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"


def assess_status(score: float) -> Status:
    if score <= 1.5:
        return Status.GOOD
    if score <= 2.5:
        return Status.SATISFACTORY
    if score <= 3.5:
        return Status.UNSATISFACTORY
    return Status.UNACCEPTABLE


def clamp_score(score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, score))


@dataclass
class Recommendation:
    scope: str  # category or item name
    priority: Priority
    text: str
    timeline: Optional[str] = None
    criteria: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope,
            "priority": self.priority.value,
            "text": self.text,
            "timeline": self.timeline,
            "criteria": self.criteria,
        }
