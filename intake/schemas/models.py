"""Pydantic v2 models for the incident-intake draft.

The draft is a three-level document: one IncidentDraft owns an ordered list
of FamilyRecord entries, and each family owns an ordered list of
MemberRecord entries. Field names follow the backend wire format so that
``model_dump()`` is the base of the submission payload.

All three models are frozen. Edits go through ``evolve()`` (or the binding
and resizer modules built on it), which return new instances and leave the
input untouched.

Structural invariants enforced at construction time:
- ``len(families) == total_families``
- ``families[i].family_number == i + 1``
- ``family_size`` is computed from ``len(members)`` and never stored
- the inactive family location field is always empty
- ``pwd_type`` is empty unless ``vulnerable_groups`` contains PWD
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


# ── Fixed vocabularies owned by the model ──

# Severity is a closed set in every deployment
SEVERITY_LEVELS = frozenset({"Low", "Medium", "High", "Critical"})

# Displacement flag is boolean-as-enum on the wire
DISPLACED_VALUES = frozenset({"Y", "N"})

PWD_GROUP = "PWD"

MIN_FAMILIES = 1
MAX_FAMILIES = 100

DEFAULT_INCIDENT_TYPE = "Flood"
DEFAULT_SEVERITY = "Medium"


def evolve(model: BaseModel, **changes) -> BaseModel:
    """Return a re-validated copy of ``model`` with ``changes`` applied.

    Unlike ``model_copy(update=...)`` the result goes through field
    validation, so a bad value raises ``pydantic.ValidationError`` instead
    of slipping into the document. Nested model instances that are not
    changed are carried over as-is.
    """
    data = dict(model)
    data.update(changes)
    return type(model).model_validate(data)


# ── Member Record ──

class MemberRecord(BaseModel):
    """One person inside a family unit.

    Every scalar defaults to empty so a freshly appended member is a blank
    row; the validator decides what is required at submit time.
    """

    model_config = {"frozen": True}

    last_name: str = Field(default="", description="Family name")
    first_name: str = Field(default="", description="Given name")
    middle_name: str = Field(default="", description="Middle name (optional)")
    position_in_family: str = Field(
        default="",
        description="Role within the family unit",
        examples=["Head (Father)", "Member"],
    )
    sex_gender_identity: str = Field(default="", examples=["Female", "Prefer not to say"])
    age: Optional[Union[int, float, str]] = Field(
        default=None,
        description="Age in years. Raw input is kept; range checks happen at validation time.",
        examples=[34, "7"],
    )
    category: str = Field(
        default="",
        description="Age band",
        examples=["Adult (18-59 y/o)"],
    )
    civil_status: str = Field(default="", examples=["Married"])
    ethnicity: str = Field(default="", examples=["CHRISTIAN"])
    vulnerable_groups: list[str] = Field(
        default_factory=list,
        description="Multi-select special-assistance tags; may be empty",
    )
    casualty: str = Field(
        default="",
        description="Casualty status, empty when not a casualty",
        examples=["", "Injured/ill"],
    )
    displaced: str = Field(
        default="N",
        description="Y when the member has left their normal residence",
    )
    pwd_type: str = Field(
        default="",
        description="Disability type; meaningful only when vulnerable_groups contains PWD",
    )

    @field_validator("displaced")
    @classmethod
    def validate_displaced(cls, v: str) -> str:
        if v not in DISPLACED_VALUES:
            raise ValueError(f"displaced must be 'Y' or 'N', got {v!r}")
        return v

    @field_validator("vulnerable_groups")
    @classmethod
    def dedupe_groups(cls, v: list[str]) -> list[str]:
        # Set semantics, first-selected order
        return list(dict.fromkeys(v))

    @model_validator(mode="before")
    @classmethod
    def clear_pwd_type(cls, data):
        # pwd_type only applies while PWD is selected
        if not isinstance(data, dict) or not data.get("pwd_type"):
            return data
        groups = data.get("vulnerable_groups") or []
        if isinstance(groups, (list, tuple)) and PWD_GROUP not in groups:
            data = {**data, "pwd_type": ""}
        return data

    @property
    def is_displaced(self) -> bool:
        return self.displaced == "Y"

    @property
    def display_name(self) -> str:
        """Name as shown in validation messages ("Unnamed" when blank)."""
        return f"{self.first_name or 'Unnamed'} {self.last_name}".strip()


# ── Family Record ──

class FamilyRecord(BaseModel):
    """One family unit affected by the incident.

    Exactly one of ``evacuation_center`` / ``alternative_location`` is the
    active location field: the evacuation center when any member is
    displaced, the alternative location otherwise. The inactive one is
    cleared whenever a family is built, edited or loaded.
    """

    model_config = {"frozen": True}

    family_number: int = Field(
        ...,
        ge=1,
        description="1-based position in the draft; assigned by the resizer",
    )
    evacuation_center: str = Field(
        default="",
        description="Where displaced members are sheltering",
    )
    alternative_location: str = Field(
        default="",
        description="Where the family stays when nobody is displaced",
    )
    members: list[MemberRecord] = Field(
        default_factory=lambda: [MemberRecord()],
        description="Ordered family members",
    )

    @model_validator(mode="before")
    @classmethod
    def clear_inactive_location(cls, data):
        if not isinstance(data, dict):
            return data
        members = data.get("members") or []
        if not isinstance(members, (list, tuple)):
            return data  # field validation reports the bad members value
        displaced = any(
            m.is_displaced if isinstance(m, MemberRecord)
            else isinstance(m, dict) and m.get("displaced") == "Y"
            for m in members
        )
        inactive = "alternative_location" if displaced else "evacuation_center"
        if data.get(inactive):
            data = {**data, inactive: ""}
        return data

    @computed_field
    @property
    def family_size(self) -> int:
        return len(self.members)

    @property
    def is_displaced(self) -> bool:
        return any(m.is_displaced for m in self.members)

    @property
    def active_location_field(self) -> str:
        return "evacuation_center" if self.is_displaced else "alternative_location"

    @property
    def active_location(self) -> str:
        return getattr(self, self.active_location_field)


def _now() -> datetime:
    return datetime.now().replace(second=0, microsecond=0)


# ── Incident Draft ──

class IncidentDraft(BaseModel):
    """Root aggregate of the intake flow and the unit of submission.

    ``total_families`` is the local "how many families" control. When a
    draft is built without explicit families, one blank family is created
    per count; when families are supplied without a count, the count is
    taken from them.
    """

    model_config = {"frozen": True}

    incident_type: str = Field(
        default=DEFAULT_INCIDENT_TYPE,
        description="Incident classification",
        examples=["Flood", "Landslide", "Fire"],
    )
    title: str = Field(default="", description="Short incident title")
    description: str = Field(default="", description="Free-text narrative")
    location: str = Field(default="", description="Where the incident happened")
    barangay: str = Field(default="", description="Barangay of the incident")
    purok: str = Field(default="", description="Purok / sub-area (optional)")
    incident_date: datetime = Field(
        default_factory=_now,
        description="When the incident happened; defaults to draft creation time",
    )
    severity: str = Field(default=DEFAULT_SEVERITY, examples=["Low", "Critical"])
    total_families: int = Field(
        default=MIN_FAMILIES,
        ge=MIN_FAMILIES,
        le=MAX_FAMILIES,
        description="Desired number of families; drives the families list length",
    )
    families: list[FamilyRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def seed_families(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        families = data.get("families")
        if families is None:
            count = data.get("total_families", MIN_FAMILIES)
            try:
                count = int(count)
            except (TypeError, ValueError):
                return data  # field validation reports the bad count
            data["families"] = [
                FamilyRecord(family_number=i + 1)
                for i in range(max(count, 0))
            ]
        else:
            numbered = []
            for i, family in enumerate(families):
                if isinstance(family, dict) and "family_number" not in family:
                    family = {**family, "family_number": i + 1}
                numbered.append(family)
            data["families"] = numbered
            data.setdefault("total_families", len(numbered))
        return data

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v: str) -> str:
        if v not in SEVERITY_LEVELS:
            raise ValueError(
                f"Invalid severity '{v}'. Must be one of: {sorted(SEVERITY_LEVELS)}"
            )
        return v

    @model_validator(mode="after")
    def check_family_structure(self) -> IncidentDraft:
        if len(self.families) != self.total_families:
            raise ValueError(
                f"total_families is {self.total_families} but "
                f"{len(self.families)} families are present"
            )
        for i, family in enumerate(self.families):
            if family.family_number != i + 1:
                raise ValueError(
                    f"family at position {i + 1} has family_number {family.family_number}"
                )
        return self

    @property
    def affected_families(self) -> int:
        return len(self.families)

    @property
    def affected_individuals(self) -> int:
        return sum(len(f.members) for f in self.families)

    def with_family(self, index: int, family: FamilyRecord) -> IncidentDraft:
        """Return a copy with the family at ``index`` replaced."""
        families = list(self.families)
        families[index] = family
        return evolve(self, families=families)
