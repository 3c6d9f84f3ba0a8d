# tests/conftest.py

from datetime import datetime

import pytest

from fleetscore.rubrics.standards import get_default_standards, standards_from_dict

PINNED_NOW = datetime(2025, 7, 29, 9, 30, 0)


@pytest.fixture
def fixed_clock():
    return lambda: PINNED_NOW


@pytest.fixture
def fleet_standards():
    return get_default_standards()


@pytest.fixture
def small_tree():
    """Two categories; the mooring subcategory has unequal item weights."""
    return standards_from_dict({
        "deck": {
            "weight": 0.6,
            "subcategories": {
                "Mooring": {
                    "weight": 1.0,
                    "items": {
                        "Winches": {
                            "weight": 0.7,
                            "criteria": "Winch condition",
                            "keywords": ["winch"],
                            "improvement_action": "Overhaul the winches",
                            "praise_comment": "Winches are in fine order",
                        },
                        "Gangway": {
                            "weight": 0.3,
                            "criteria": "Gangway condition",
                            "keywords": ["gangway"],
                        },
                    },
                },
            },
        },
        "technical": {
            "weight": 0.4,
            "subcategories": {
                "Engine Room": {
                    "weight": 0.5,
                    "items": {
                        "Purifiers": {
                            "weight": 1.0,
                            "criteria": "Purifier room housekeeping",
                            "keywords": ["purifier"],
                        },
                    },
                },
                "Empty": {"weight": 0.5, "items": {}},
            },
        },
    })
