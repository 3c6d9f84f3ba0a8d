# tests/test_standards.py

import json

import pytest

from fleetscore.errors import StandardsConfigError
from fleetscore.rubrics.standards import load_standards, standards_from_dict


def _doc(weight=1.0, items=None):
    return {
        "deck": {
            "weight": weight,
            "subcategories": {
                "Mooring": {"weight": 1.0, "items": items if items is not None else {
                    "Winches": {"weight": 1.0, "keywords": ["winch"]},
                }},
            },
        },
    }


def test_bundled_standards(fleet_standards):
    assert [c.name for c in fleet_standards.categories] == ["deck", "cargo", "technical", "accommodation"]
    assert all(c.weight == 0.25 for c in fleet_standards.categories)
    hull = fleet_standards.category("deck").subcategories[0]
    assert hull.name == "Hull and Structure"
    assert hull.items[0].name == "Hull Coating"
    assert "hull coating" in hull.items[0].keywords
    assert fleet_standards.item_count() == sum(
        len(s.items) for c in fleet_standards.categories for s in c.subcategories
    )


def test_tree_preserves_document_order():
    tree = standards_from_dict(_doc(items={
        "Winches": {"weight": 0.5},
        "Bitts": {"weight": 0.2},
        "Fairleads": {"weight": 0.3},
    }))
    assert [i.name for i in tree.categories[0].subcategories[0].items] == ["Winches", "Bitts", "Fairleads"]
    assert tree.category("cargo") is None


@pytest.mark.parametrize("weight", [0, -0.5, "0.3", None, True])
def test_unusable_weights_rejected(weight):
    with pytest.raises(StandardsConfigError):
        standards_from_dict(_doc(weight=weight))


@pytest.mark.parametrize("doc", [
    [],
    {"deck": "weight 1"},
    {"deck": {"weight": 1.0}},
    {"deck": {"weight": 1.0, "subcategories": {"Mooring": {"weight": 1.0, "items": []}}}},
    _doc(items={"Winches": {"weight": 1.0, "keywords": "winch"}}),
])
def test_malformed_documents_rejected(doc):
    with pytest.raises(StandardsConfigError):
        standards_from_dict(doc)


def test_load_standards_from_file(tmp_path):
    path = tmp_path / "standards.json"
    path.write_text(json.dumps(_doc()), encoding="utf-8")
    tree = load_standards(path)
    assert tree.item_count() == 1
    assert tree.to_dict()["deck"]["subcategories"]["Mooring"]["items"]["Winches"]["keywords"] == ["winch"]


def test_load_standards_invalid_json(tmp_path):
    path = tmp_path / "standards.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StandardsConfigError):
        load_standards(path)
