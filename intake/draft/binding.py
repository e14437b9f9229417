"""Field bindings: path-addressed edits of an IncidentDraft.

A binding path addresses one scalar (or multi-select) value in the draft::

    title
    families[0].evacuation_center
    families[2].members[1].age

``set_field`` returns a new draft with that value replaced; the input draft
is never modified. Derived state is recomputed on the way through:

- ``total_families`` goes through the resizer
- a member's ``displaced`` change clears the family's inactive location field
  (done by model validation, so loaded drafts obey it too)
- deselecting PWD from ``vulnerable_groups`` clears ``pwd_type``

Indices that do not exist are ignored (logged, draft returned unchanged).
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from intake.draft.resizer import resize_families
from intake.reference import ReferenceData
from intake.schemas.models import (
    PWD_GROUP,
    FamilyRecord,
    IncidentDraft,
    MemberRecord,
    evolve,
)

logger = logging.getLogger(__name__)

_PATH_RE = re.compile(
    r"^(?:families\[(?P<family>\d+)\]\."
    r"(?:members\[(?P<member>\d+)\]\.)?)?"
    r"(?P<field>[a-z_]+)$"
)

DRAFT_FIELDS = frozenset(IncidentDraft.model_fields) - {"families"}
FAMILY_FIELDS = frozenset({"evacuation_center", "alternative_location"})
MEMBER_FIELDS = frozenset(MemberRecord.model_fields)
READ_ONLY_FIELDS = frozenset({"family_number", "family_size"})


class FieldPathError(ValueError):
    """Raised for a binding path that does not name a bindable field."""


class ReadOnlyFieldError(FieldPathError):
    """Raised when binding a derived field (family number / family size)."""


class InactiveFieldError(ValueError):
    """Raised when binding a field that is not currently active.

    ``evacuation_center`` is editable only while a family member is
    displaced; ``alternative_location`` only while nobody is; ``pwd_type``
    only while the member has PWD among its vulnerable groups.
    """


@dataclass(frozen=True)
class FieldPath:
    """Parsed binding path."""

    field: str
    family_index: Optional[int] = None
    member_index: Optional[int] = None

    @classmethod
    def parse(cls, path: str) -> "FieldPath":
        match = _PATH_RE.match(path.strip())
        if not match:
            raise FieldPathError(f"Unparseable field path: {path!r}")
        family = match.group("family")
        member = match.group("member")
        parsed = cls(
            field=match.group("field"),
            family_index=int(family) if family is not None else None,
            member_index=int(member) if member is not None else None,
        )
        parsed._check_field(path)
        return parsed

    @classmethod
    def family(cls, family_index: int, field: str) -> "FieldPath":
        return cls.parse(f"families[{family_index}].{field}")

    @classmethod
    def member(cls, family_index: int, member_index: int, field: str) -> "FieldPath":
        return cls.parse(f"families[{family_index}].members[{member_index}].{field}")

    @property
    def level(self) -> str:
        if self.family_index is None:
            return "incident"
        if self.member_index is None:
            return "family"
        return "member"

    def _check_field(self, path: str) -> None:
        if self.level == "family" and self.field in READ_ONLY_FIELDS:
            raise ReadOnlyFieldError(f"{self.field} is derived and cannot be set ({path!r})")
        allowed = {
            "incident": DRAFT_FIELDS,
            "family": FAMILY_FIELDS,
            "member": MEMBER_FIELDS,
        }[self.level]
        if self.field not in allowed:
            raise FieldPathError(f"Unknown {self.level} field {self.field!r} in path {path!r}")

    def __str__(self) -> str:
        if self.level == "incident":
            return self.field
        if self.level == "family":
            return f"families[{self.family_index}].{self.field}"
        return f"families[{self.family_index}].members[{self.member_index}].{self.field}"


def _set_member_field(family: FamilyRecord, member_index: int, field: str, value) -> FamilyRecord:
    member = family.members[member_index]
    if field == "pwd_type" and value and PWD_GROUP not in member.vulnerable_groups:
        raise InactiveFieldError(
            f"pwd_type is not active for member {member_index + 1} of family "
            f"{family.family_number} ({PWD_GROUP} not selected)"
        )
    members = list(family.members)
    members[member_index] = evolve(member, **{field: value})
    # Re-validation clears the inactive location field and a stale pwd_type
    return evolve(family, members=members)


def _set_family_field(family: FamilyRecord, field: str, value) -> FamilyRecord:
    if field != family.active_location_field and value:
        raise InactiveFieldError(
            f"{field} is not active for family {family.family_number} "
            f"(active field: {family.active_location_field})"
        )
    return evolve(family, **{field: value})


def set_field(
    draft: IncidentDraft,
    path: Union[str, FieldPath],
    value,
    reference: Optional[ReferenceData] = None,
) -> IncidentDraft:
    """Return a new draft with the value at ``path`` replaced.

    Args:
        draft: The current draft (left unchanged).
        path: Binding path string or parsed FieldPath.
        value: New value for the addressed field.
        reference: When given, enumerated fields must take a value from
                   the supplied vocabulary.

    Raises:
        FieldPathError: Unknown or read-only field.
        DomainValueError: Value outside the reference vocabulary.
        InactiveFieldError: Binding an inactive location field, or pwd_type
                            without PWD selected.
        pydantic.ValidationError: Value rejected by the model.
    """
    fp = path if isinstance(path, FieldPath) else FieldPath.parse(path)
    if reference is not None:
        reference.check(fp.field, value)

    if fp.level == "incident":
        if fp.field == "total_families":
            return resize_families(draft, value)
        return evolve(draft, **{fp.field: value})

    if fp.family_index >= len(draft.families):
        logger.debug("set_field: no family at index %d for %s, ignoring", fp.family_index, fp)
        return draft
    family = draft.families[fp.family_index]

    if fp.level == "family":
        return draft.with_family(fp.family_index, _set_family_field(family, fp.field, value))

    if fp.member_index >= len(family.members):
        logger.debug("set_field: no member at index %d for %s, ignoring", fp.member_index, fp)
        return draft
    updated = _set_member_field(family, fp.member_index, fp.field, value)
    return draft.with_family(fp.family_index, updated)
