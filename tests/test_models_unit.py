from __future__ import annotations

import pytest

from comparison.models import DiffResult, MatchState, NormalizedBox, PageDecision, PageText, Region, RegionPair, TextFragment


def test_text_fragment_is_immutable_and_detects_blank_text():
    frag = TextFragment("  ", 0, 0)
    assert frag.is_blank()
    with pytest.raises(AttributeError):
        frag.text = "x"  # type: ignore[misc]


def test_normalized_box_distance_and_region():
    a = NormalizedBox(" a ", 0, 0, 20, 10)
    b = NormalizedBox("a", 3, 4, 20, 10)
    assert a.key == "a"
    assert a.distance_to(b) == pytest.approx(5.0)
    assert a.to_region() == Region(0, 0, 20, 10)


def test_match_state_commit_and_complements():
    state = MatchState()
    state.commit(0, 2)
    assert state.pairs == {0: 2}
    assert state.unmatched_a(3) == [1, 2]
    assert state.unmatched_b(3) == [0, 1]


def test_region_pair_sides_and_anchor_comparison():
    pair = RegionPair(1, 2, 3, 4, 5, 6, 7, 8)
    assert pair.region_a == Region(1, 2, 3, 4)
    assert pair.region_b == Region(5, 6, 7, 8)

    near = RegionPair(1.5, 2.5, 30, 40, 5.2, 6.9, 70, 80)
    assert pair.same_anchors(near, 1.0)  # widths/heights are not compared
    assert not pair.same_anchors(RegionPair(1, 2, 3, 4, 6, 6, 7, 8), 1.0)


def test_diff_result_region_helpers_and_dict():
    pair = RegionPair(1, 2, 3, 4, 5, 6, 7, 8)
    result = DiffResult(has_changes=True, deleted=[Region(0, 0, 1, 1)], modified=[pair])

    assert result.has_regions
    assert result.regions_a() == [Region(0, 0, 1, 1), Region(1, 2, 3, 4)]
    assert result.regions_b() == [Region(5, 6, 7, 8)]
    d = result.to_dict()
    assert d["deleted"] == [{"x": 0, "y": 0, "width": 1, "height": 1}]
    assert d["modified"][0]["width2"] == 7
    assert not DiffResult().has_regions


def test_page_text_joined_raw_text_prefers_explicit_value():
    page = PageText(page_num=1, height=100, fragments=[TextFragment("a", 0, 0), TextFragment("b", 0, 0)])
    assert page.joined_raw_text() == "a b"
    page.raw_text = "explicit"
    assert page.joined_raw_text() == "explicit"


def test_page_decision_constructors():
    assert PageDecision.only_in_a(3).has_b is False
    assert PageDecision.only_in_b(3).has_a is False
    failed = PageDecision.failed(2, "boom", has_a=False, has_b=True)
    assert failed.kind == "failed"
    assert failed.to_dict() == {"page_num": 2, "kind": "failed", "error": "boom"}

    differs = PageDecision.differs(1, DiffResult(has_changes=True))
    assert differs.to_dict()["diff"]["has_changes"] is True
    assert PageDecision.identical(4).to_dict() == {"page_num": 4, "kind": "identical"}
