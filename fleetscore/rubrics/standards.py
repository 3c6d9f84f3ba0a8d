# fleetscore/rubrics/standards.py
"""
Fleet standards tree: Category -> Subcategory -> Item, with weights and the
keyword/narrative metadata the item scorer works from.

The tree is configuration. It is loaded once (see get_default_standards) and
shared read-only between analyses.

JSON shape (insertion order is preserved and becomes report order):

    {
      "deck": {
        "weight": 0.25,
        "description": "...",
        "subcategories": {
          "Hull and Structure": {
            "weight": 0.3,
            "items": {
              "Hull Coating": {"weight": 0.4, "criteria": "...", "keywords": [...], ...}
            }
          }
        }
      }
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from fleetscore import config
from fleetscore.errors import StandardsConfigError

logger = logging.getLogger(__name__)

BUNDLED_STANDARDS_PATH = Path(__file__).with_name("fleet_standards.json")


@dataclass(frozen=True)
class ItemDefinition:
    """Leaf unit of assessment."""
    name: str
    weight: float
    criteria: str = ""
    keywords: Tuple[str, ...] = ()
    good_practice: str = ""
    deficiency: str = ""
    improvement_action: str = ""
    praise_comment: str = ""


@dataclass(frozen=True)
class SubcategoryDefinition:
    name: str
    weight: float
    items: Tuple[ItemDefinition, ...]
    description: str = ""


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    weight: float
    subcategories: Tuple[SubcategoryDefinition, ...]
    description: str = ""


@dataclass(frozen=True)
class StandardsTree:
    categories: Tuple[CategoryDefinition, ...]

    def category(self, name: str) -> Optional[CategoryDefinition]:
        return next((c for c in self.categories if c.name == name), None)

    def item_count(self) -> int:
        return sum(len(s.items) for c in self.categories for s in c.subcategories)

    def to_dict(self) -> Dict[str, Any]:
        """Summary view (names, weights, criteria) for listing endpoints."""
        return {
            c.name: {
                "weight": c.weight,
                "description": c.description,
                "subcategories": {
                    s.name: {
                        "weight": s.weight,
                        "description": s.description,
                        "items": {
                            i.name: {"weight": i.weight, "criteria": i.criteria, "keywords": list(i.keywords)}
                            for i in s.items
                        },
                    }
                    for s in c.subcategories
                },
            }
            for c in self.categories
        }


# =============================================================================
# PARSING
# =============================================================================

def _weight(node: Mapping[str, Any], where: str) -> float:
    raw = node.get("weight")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise StandardsConfigError(f"{where}: weight must be a number, got {raw!r}")
    if raw <= 0:
        raise StandardsConfigError(f"{where}: weight must be positive, got {raw!r}")
    return float(raw)


def _children(node: Mapping[str, Any], key: str, where: str) -> Mapping[str, Any]:
    children = node.get(key)
    if not isinstance(children, Mapping):
        raise StandardsConfigError(f"{where}: '{key}' must be an object")
    return children


def _item_from_dict(name: str, node: Mapping[str, Any], where: str) -> ItemDefinition:
    if not isinstance(node, Mapping):
        raise StandardsConfigError(f"{where}: item must be an object")
    keywords = node.get("keywords", [])
    if not isinstance(keywords, (list, tuple)) or not all(isinstance(k, str) for k in keywords):
        raise StandardsConfigError(f"{where}: keywords must be a list of strings")
    return ItemDefinition(
        name=name,
        weight=_weight(node, where),
        criteria=node.get("criteria", ""),
        keywords=tuple(keywords),
        good_practice=node.get("good_practice", ""),
        deficiency=node.get("deficiency", ""),
        improvement_action=node.get("improvement_action", ""),
        praise_comment=node.get("praise_comment", ""),
    )


def standards_from_dict(data: Mapping[str, Any]) -> StandardsTree:
    """
    Build a StandardsTree from its JSON-compatible form.
    Sibling weights are not required to sum to 1.0.

    Raises:
        StandardsConfigError: the document is missing sections or has unusable weights
    """
    if not isinstance(data, Mapping):
        raise StandardsConfigError("standards document must be an object")

    categories = []
    for cat_name, cat in data.items():
        if not isinstance(cat, Mapping):
            raise StandardsConfigError(f"{cat_name}: category must be an object")
        subcats = []
        for sub_name, sub in _children(cat, "subcategories", cat_name).items():
            where = f"{cat_name}/{sub_name}"
            if not isinstance(sub, Mapping):
                raise StandardsConfigError(f"{where}: subcategory must be an object")
            items = tuple(
                _item_from_dict(item_name, item, f"{where}/{item_name}")
                for item_name, item in _children(sub, "items", where).items()
            )
            subcats.append(SubcategoryDefinition(
                name=sub_name,
                weight=_weight(sub, where),
                items=items,
                description=sub.get("description", ""),
            ))
        categories.append(CategoryDefinition(
            name=cat_name,
            weight=_weight(cat, cat_name),
            subcategories=tuple(subcats),
            description=cat.get("description", ""),
        ))

    return StandardsTree(categories=tuple(categories))


def load_standards(path: str | Path) -> StandardsTree:
    """Load a standards tree from a JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise StandardsConfigError(f"{path}: invalid JSON ({e})") from e
    tree = standards_from_dict(data)
    logger.info(
        "Loaded standards from %s: %d categories, %d items",
        path, len(tree.categories), tree.item_count(),
    )
    return tree


@lru_cache(maxsize=1)
def get_default_standards() -> StandardsTree:
    """The process-wide tree: FLEET_STANDARDS_PATH if set, else the bundled fleet standards."""
    return load_standards(config.STANDARDS_PATH or BUNDLED_STANDARDS_PATH)
