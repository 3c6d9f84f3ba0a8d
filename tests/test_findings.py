# tests/test_findings.py

import pytest

from fleetscore.errors import InvalidInputError
from fleetscore.features.findings import (
    classify_findings,
    classify_flagged_items,
    is_deficiency_fragment,
    is_good_practice_fragment,
    split_fragments,
)
from fleetscore.features.sections import find_flagged_items

FLAGGED_REPORT = (
    "Vessel name: Lake Tazawa\n"
    "Good practice: crew kept the mooring deck tidy and organised\n"
    "Deficiency: rust on the forward winch foundation\n"
    "Flagged items\n"
    "Private & Confidential\n"
    "Fidelio: Faded and corroded draft marks at stern area\n"
    "Crew showed excellent teamwork arrangement during mooring operations\n"
    "Page 3 of 12\n"
    "Condition assessment\n"
    "Engine room bilges found oily and poorly maintained\n"
)


def test_cue_phrases_fill_both_buckets():
    text = (
        "Good practice: lifeboat davits greased and tested\n"
        "Defect: emergency light in steering gear room inoperative\n"
        "Non-conformity: oil record book entries incomplete\n"
    )
    findings = classify_findings(text)
    assert findings.source == "patterns"
    assert findings.good_practices == ["lifeboat davits greased and tested"]
    assert findings.deficiencies == [
        "oil record book entries incomplete",
        "emergency light in steering gear room inoperative",
    ]


def test_boilerplate_is_not_a_finding():
    findings = classify_findings("Deficiency: Deficiency identified requiring corrective action")
    assert findings.deficiencies == []
    assert findings.good_practices == []
    assert findings.source == "none"


def test_buckets_are_capped_at_five():
    text = "\n".join(f"Defect: broken seal on hatch number {n}" for n in range(8))
    findings = classify_findings(text)
    assert len(findings.deficiencies) == 5


def test_flagged_items_section_bounds():
    section = find_flagged_items(FLAGGED_REPORT)
    assert section is not None
    assert section.text.startswith("Flagged items")
    assert "Condition assessment" not in section.text
    assert "oily" not in section.text
    assert find_flagged_items("no such heading") is None


def test_flagged_items_override_generic_matches():
    findings = classify_findings(FLAGGED_REPORT)
    assert findings.source == "flagged_items"
    assert findings.deficiencies == ["Faded and corroded draft marks at stern area"]
    assert findings.good_practices == ["Crew showed excellent teamwork arrangement during mooring operations"]
    # Generic cue matches from outside the section are discarded entirely
    assert not any("winch foundation" in d for d in findings.deficiencies)
    assert not any("mooring deck tidy" in g for g in findings.good_practices)


def test_flagged_fragments_strip_name_prefix_and_noise():
    fragments = split_fragments("Flagged items\nL.Tazawa: Cargo vent fan lever stuck on deck 5; Private & Confidential")
    assert "Cargo vent fan lever stuck on deck 5" in fragments
    assert not any("Confidential" in f for f in fragments)


def test_flagged_section_drops_stop_words_and_dedupes():
    section = (
        "Flagged items\n"
        "Assignee: Chief Officer, priority high\n"
        "Chain box cover seized at the windlass\n"
        "Chain box cover seized at the windlass\n"
    )
    findings = classify_flagged_items(section)
    assert findings.deficiencies == ["Chain box cover seized at the windlass"]
    assert findings.good_practices == []


@pytest.mark.parametrize("fragment,is_def,is_good", [
    ("Damaged antiskid paint on ramp walkway", True, False),
    ("Engine room", False, False),  # too short to count
    ("Outstanding housekeeping in the galley", False, True),
    ("Well done", False, False),
    ("Bridge team were professional and working calmly", False, True),
])
def test_fragment_shapes(fragment, is_def, is_good):
    assert is_deficiency_fragment(fragment) is is_def
    assert is_good_practice_fragment(fragment) is is_good


def test_line_sentiment_is_last_resort():
    text = "The gangway is in good order today\nFire door hinge was faulty"
    findings = classify_findings(text)
    assert findings.source == "lines"
    assert findings.good_practices == ["The gangway is in good order today"]
    assert findings.deficiencies == ["Fire door hinge was faulty"]


def test_non_text_input_is_rejected():
    with pytest.raises(InvalidInputError):
        classify_findings(None)
