"""Draft -> wire payload serialization and the confirmation summary.

Payload shape (POST body)::

    {
      "incident_type": "Flood", "title": ..., "description": ...,
      "location": ..., "barangay": ..., "purok": ...,
      "incident_date": "2025-07-14T02:30:00.000Z",
      "severity": "High",
      "affected_families": 2,
      "affected_individuals": 5,
      "families": [
        {"family_number": 1, "family_size": 3,
         "evacuation_center": ..., "alternative_location": ...,
         "members": [{"last_name": ..., "age": 34, ...}, ...]},
        ...
      ]
    }

The local ``total_families`` control field is never sent; the two
aggregates are computed from the families actually present.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from intake.schemas.models import IncidentDraft
from intake.validation import parse_age


def format_instant(value: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with milliseconds and a Z suffix.

    Naive datetimes are read as local time (the form's datetime input has
    no zone).
    """
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def _wire_age(value):
    number = parse_age(value)
    if number is None:
        return value
    # Whole years, truncated like the form's integer parse
    return int(number)


def serialize_draft(draft: IncidentDraft) -> dict:
    """Build the submission payload for a validated draft."""
    payload = draft.model_dump(exclude={"total_families", "families", "incident_date"})
    payload["incident_date"] = format_instant(draft.incident_date)
    payload["affected_families"] = draft.affected_families
    payload["affected_individuals"] = draft.affected_individuals

    families = []
    for family in draft.families:
        data = family.model_dump()
        for member in data["members"]:
            member["age"] = _wire_age(member["age"])
        families.append(data)
    payload["families"] = families
    return payload


@dataclass(frozen=True)
class ConfirmationSummary:
    """What the user confirms before the write is issued."""

    families: int
    persons: int
    location: str
    barangay: str
    incident_type: str

    @classmethod
    def from_draft(cls, draft: IncidentDraft) -> "ConfirmationSummary":
        return cls(
            families=draft.affected_families,
            persons=draft.affected_individuals,
            location=draft.location,
            barangay=draft.barangay,
            incident_type=draft.incident_type,
        )

    def render(self) -> str:
        return (
            "Are you sure you want to report this incident?\n\n"
            "Summary:\n"
            f"• {self.families} families affected\n"
            f"• {self.persons} total persons\n"
            f"• Location: {self.location}, {self.barangay}\n"
            f"• Type: {self.incident_type}"
        )
