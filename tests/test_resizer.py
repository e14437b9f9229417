"""Tests for family/member collection resizing.

Invariants checked after every operation:
  - len(families) == total_families
  - families present before a growth are the same objects after it
  - every family keeps at least one member
  - family_size == len(members)
"""

import pytest

from intake.draft.binding import set_field
from intake.draft.resizer import add_member, remove_member, resize_families
from intake.schemas.models import IncidentDraft


def _assert_invariants(draft: IncidentDraft) -> None:
    assert len(draft.families) == draft.total_families
    for i, family in enumerate(draft.families):
        assert family.family_number == i + 1
        assert len(family.members) >= 1
        assert family.family_size == len(family.members)


# ── Family count ──


class TestResizeFamilies:

    def test_growth_appends_blank_families(self):
        draft = resize_families(IncidentDraft(), 3)
        _assert_invariants(draft)
        assert [f.family_number for f in draft.families] == [1, 2, 3]
        new = draft.families[2]
        assert new.family_size == 1
        assert new.members[0].displaced == "N"
        assert new.members[0].vulnerable_groups == []

    def test_growth_preserves_existing_families(self):
        draft = set_field(IncidentDraft(total_families=2), "families[1].members[0].first_name", "Lito")
        grown = resize_families(draft, 5)
        assert grown.families[0] is draft.families[0]
        assert grown.families[1] is draft.families[1]
        assert grown.families[1].members[0].first_name == "Lito"

    def test_shrink_keeps_prefix(self):
        draft = resize_families(IncidentDraft(), 4)
        draft = set_field(draft, "families[3].members[0].first_name", "Gone")
        shrunk = resize_families(draft, 2)
        _assert_invariants(shrunk)
        assert shrunk.families == draft.families[:2]

    def test_same_count_returns_same_draft(self):
        draft = IncidentDraft(total_families=2)
        assert resize_families(draft, 2) is draft

    def test_numeric_string_accepted(self):
        assert resize_families(IncidentDraft(), "4").total_families == 4

    @pytest.mark.parametrize("count", [0, -1, 101, "abc", None, ""])
    def test_invalid_count_rejected(self, count):
        with pytest.raises(ValueError):
            resize_families(IncidentDraft(), count)

    def test_count_sequence_keeps_sync(self):
        draft = IncidentDraft()
        for count in [3, 7, 2, 2, 10, 1, 100, 1]:
            draft = resize_families(draft, count)
            _assert_invariants(draft)
            assert draft.total_families == count

    def test_grow_then_shrink_back_restores_original_family(self):
        draft = IncidentDraft()
        draft = set_field(draft, "title", "Flood in Purok 3")
        draft = set_field(draft, "families[0].members[0].last_name", "Santos")
        draft = set_field(draft, "families[0].alternative_location", "Chapel")
        original = draft.families[0]

        draft = resize_families(draft, 3)
        draft = resize_families(draft, 1)

        assert len(draft.families) == 1
        assert draft.families[0] == original
        assert draft.families[0].members[0].last_name == "Santos"
        assert draft.families[0].alternative_location == "Chapel"
        assert draft.title == "Flood in Purok 3"


# ── Members ──


class TestMembers:

    def test_add_member(self):
        draft = add_member(IncidentDraft(), 0)
        _assert_invariants(draft)
        assert draft.families[0].family_size == 2

    def test_add_member_missing_family_is_noop(self):
        draft = IncidentDraft()
        assert add_member(draft, 4) is draft

    def test_remove_member(self):
        draft = add_member(add_member(IncidentDraft(), 0), 0)
        draft = set_field(draft, "families[0].members[1].first_name", "Middle")
        draft = set_field(draft, "families[0].members[2].first_name", "Last")
        updated = remove_member(draft, 0, 1)
        _assert_invariants(updated)
        assert [m.first_name for m in updated.families[0].members] == ["", "Last"]

    def test_remove_last_member_is_noop(self):
        draft = IncidentDraft()
        assert remove_member(draft, 0, 0) is draft
        _assert_invariants(draft)

    def test_remove_missing_member_is_noop(self):
        draft = add_member(IncidentDraft(), 0)
        assert remove_member(draft, 0, 5) is draft
        assert remove_member(draft, 3, 0) is draft

    def test_removing_only_displaced_member_clears_evacuation_center(self):
        draft = add_member(IncidentDraft(), 0)
        draft = set_field(draft, "families[0].members[1].displaced", "Y")
        draft = set_field(draft, "families[0].evacuation_center", "Covered Court")
        updated = remove_member(draft, 0, 1)
        family = updated.families[0]
        assert family.is_displaced is False
        assert family.evacuation_center == ""

    def test_member_floor_over_sequence(self):
        draft = IncidentDraft(total_families=2)
        for _ in range(3):
            draft = add_member(draft, 1)
        for _ in range(10):
            draft = remove_member(draft, 1, 0)
            _assert_invariants(draft)
        assert draft.families[1].family_size == 1
