"""Tests for the two-step wizard state machine.

Transitions:
  BASIC_INFO -> FAMILY_DETAILS (gated on the four basic fields)
  FAMILY_DETAILS -> BASIC_INFO (always)
"""

import pytest

from intake.notifications import Notifier
from intake.schemas.models import FamilyRecord, IncidentDraft
from intake.stepper import Step, StepController


def _basic_draft(**overrides) -> IncidentDraft:
    data = dict(
        incident_type="Landslide",
        title="Road blocked by landslide",
        location="Km 12 national road",
        barangay="GAWIL",
    )
    data.update(overrides)
    return IncidentDraft(**data)


class TestStepController:

    def test_starts_on_basic_info(self):
        controller = StepController()
        assert controller.step is Step.BASIC_INFO
        assert controller.can_submit is False

    @pytest.mark.parametrize("field", ["title", "location", "barangay", "incident_type"])
    def test_refuses_when_basic_field_empty(self, field):
        notifier = Notifier()
        controller = StepController(notifier)
        assert controller.advance(_basic_draft(**{field: ""})) is False
        assert controller.step is Step.BASIC_INFO
        assert notifier.last.title == "Missing Information"
        assert notifier.last.severity == "error"

    def test_all_missing_labels_in_one_message(self):
        notifier = Notifier()
        controller = StepController(notifier)
        controller.advance(IncidentDraft(incident_type=""))
        assert len(notifier.recent) == 1
        assert notifier.last.message.endswith(
            "Incident Title, Location, Barangay, Incident Type"
        )

    def test_advances_when_basic_fields_filled(self):
        controller = StepController()
        assert controller.advance(_basic_draft()) is True
        assert controller.step is Step.FAMILY_DETAILS
        assert controller.can_submit is True

    def test_family_content_does_not_gate(self):
        # Blank member and an empty family are fine for the first step
        draft = _basic_draft(families=[FamilyRecord(family_number=1, members=[])])
        assert StepController().advance(draft) is True

    def test_back_is_unconditional(self):
        controller = StepController()
        controller.advance(_basic_draft())
        assert controller.back() is Step.BASIC_INFO
        assert controller.can_submit is False

    def test_back_on_first_step_stays(self):
        controller = StepController()
        assert controller.back() is Step.BASIC_INFO

    def test_advance_on_last_step(self):
        controller = StepController()
        controller.advance(_basic_draft())
        assert controller.advance(IncidentDraft()) is True
        assert controller.step is Step.FAMILY_DETAILS

    def test_reset(self):
        controller = StepController()
        controller.advance(_basic_draft())
        controller.reset()
        assert controller.step is Step.BASIC_INFO
