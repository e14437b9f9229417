"""Draft validation for step gating and pre-submit checks.

Two passes, both pure functions of the draft:

  validate_basic_info  -- the four basic-information fields; gates the
                          BasicInfo -> FamilyDetails step
  validate_complete    -- basic info, then every family and member

The complete pass is fail-fast per member: the first family/member with
any problem stops the walk, and all of that member's missing or invalid
fields are reported together in one message. Later families and members
are not inspected in the same pass.

Exports:
    ValidationFailure  -- structured failure (title, message, location, fields)
    validate_basic_info, basic_info_failure, validate_complete, validate_field
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from intake.schemas.models import FamilyRecord, IncidentDraft, MemberRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BASIC_FIELD_LABELS = {
    "title": "Incident Title",
    "location": "Location",
    "barangay": "Barangay",
    "incident_type": "Incident Type",
}

MEMBER_FIELD_LABELS = {
    "last_name": "Last Name",
    "first_name": "First Name",
    "position_in_family": "Position in Family",
    "sex_gender_identity": "Sex/Gender Identity",
    "age": "Age",
    "category": "Category",
    "civil_status": "Civil Status",
    "ethnicity": "Ethnicity",
}

MIN_AGE = 0
MAX_AGE = 120

AGE_NOT_A_NUMBER = "Age must be a valid number."
AGE_OUT_OF_RANGE = f"Age must be between {MIN_AGE} and {MAX_AGE} years."


@dataclass(frozen=True)
class ValidationFailure:
    """One validation problem, ready to show to the user.

    ``family_number`` / ``member_number`` are 1-based and None when the
    failure is not tied to a family or member.
    """

    title: str
    message: str
    family_number: Optional[int] = None
    member_number: Optional[int] = None
    missing_fields: tuple[str, ...] = field(default_factory=tuple)
    invalid_fields: tuple[str, ...] = field(default_factory=tuple)


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return str(value).strip() == ""


def parse_age(value) -> Optional[float]:
    """Return the age as a finite number, or None if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def age_problem(value) -> Optional[str]:
    """Message for a non-blank age that is not a number in range, else None."""
    number = parse_age(value)
    if number is None:
        return AGE_NOT_A_NUMBER
    if not MIN_AGE <= number <= MAX_AGE:
        return AGE_OUT_OF_RANGE
    return None


# ---------------------------------------------------------------------------
# Basic information
# ---------------------------------------------------------------------------

def validate_basic_info(draft: IncidentDraft) -> list[str]:
    """Return labels of the missing basic-information fields (empty if none)."""
    return [
        label
        for name, label in BASIC_FIELD_LABELS.items()
        if _is_blank(getattr(draft, name))
    ]


def basic_info_failure(missing: list[str], before_proceeding: bool = True) -> ValidationFailure:
    """Aggregate missing basic-information labels into one failure."""
    field_names = ", ".join(missing)
    if before_proceeding:
        title = "Missing Information"
        message = (
            "Please fill in the following required fields before proceeding:"
            f"\n\n{field_names}"
        )
    else:
        title = "Missing Basic Information"
        message = f"Please fill in the following required fields:\n\n{field_names}"
    return ValidationFailure(title=title, message=message, missing_fields=tuple(missing))


# ---------------------------------------------------------------------------
# Families and members
# ---------------------------------------------------------------------------

def _member_failure(
    family: FamilyRecord, member_number: int, member: MemberRecord
) -> Optional[ValidationFailure]:
    missing = [
        label
        for name, label in MEMBER_FIELD_LABELS.items()
        if _is_blank(getattr(member, name))
    ]
    problems = []
    if not _is_blank(member.age):
        problem = age_problem(member.age)
        if problem:
            problems.append(problem)

    if not missing and not problems:
        return None

    header = f"Family {family.family_number}, Member {member_number} ({member.display_name}):"
    sections = []
    if missing:
        sections.append(
            "Please fill in the following required fields:\n" + ", ".join(missing)
        )
    sections.extend(problems)

    return ValidationFailure(
        title="Missing Family Member Information" if missing else "Invalid Age",
        message=header + "\n\n" + "\n\n".join(sections),
        family_number=family.family_number,
        member_number=member_number,
        missing_fields=tuple(missing),
        invalid_fields=(MEMBER_FIELD_LABELS["age"],) if problems else (),
    )


def validate_complete(draft: IncidentDraft) -> list[ValidationFailure]:
    """Validate the whole draft before submission.

    Returns:
        An empty list when the draft is submittable, otherwise a
        single-element list with the first failure found.
    """
    missing = validate_basic_info(draft)
    if missing:
        return [basic_info_failure(missing, before_proceeding=False)]

    for family in draft.families:
        if not family.members:
            return [ValidationFailure(
                title="Family Member Required",
                message=(
                    f"Family {family.family_number} must have at least 1 member. "
                    "Please add family members."
                ),
                family_number=family.family_number,
            )]

        for member_number, member in enumerate(family.members, start=1):
            failure = _member_failure(family, member_number, member)
            if failure is not None:
                logger.debug(
                    "Validation stopped at family %d member %d: %s",
                    family.family_number, member_number, failure.title,
                )
                return [failure]

    return []


def validate_field(field_name: str, value) -> Optional[str]:
    """Inline hint for a single input; None when the value is acceptable.

    Used for per-field feedback while typing, independent of the step and
    submit passes.
    """
    label = (
        BASIC_FIELD_LABELS.get(field_name)
        or MEMBER_FIELD_LABELS.get(field_name)
        or field_name.replace("_", " ").capitalize()
    )
    if _is_blank(value):
        return f"{label} is required"
    if field_name == "age":
        number = parse_age(value)
        if number is None:
            return "Age must be a number"
        if not MIN_AGE <= number <= MAX_AGE:
            return f"Age must be between {MIN_AGE} and {MAX_AGE}"
    return None
