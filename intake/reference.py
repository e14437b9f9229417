"""Fixed-vocabulary reference data for the intake form dropdowns.

The backend owns these lists; the intake core only checks that a selected
value is a member of the supplied set. Defaults are the municipal
deployment's vocabularies. A JSON file with any subset of the keys
overrides the defaults key by key.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from intake.paths import REFERENCE_DATA_PATH
from intake.schemas.models import SEVERITY_LEVELS, IncidentDraft, MemberRecord

logger = logging.getLogger(__name__)

# Bindable field name -> ReferenceData attribute
FIELD_DOMAINS = {
    "incident_type": "incident_types",
    "severity": "severities",
    "barangay": "barangays",
    "sex_gender_identity": "sex_gender_identity",
    "civil_status": "civil_status",
    "position_in_family": "position_in_family",
    "category": "categories",
    "ethnicity": "ethnicity",
    "vulnerable_groups": "vulnerable_groups",
    "casualty": "casualty",
    "pwd_type": "pwd_types",
}


class DomainValueError(ValueError):
    """Raised when a value is not a member of its field's vocabulary.

    Attributes:
        field: The bound field name.
        value: The rejected value.
    """

    def __init__(self, field: str, value, allowed: list[str]):
        self.field = field
        self.value = value
        super().__init__(
            f"{value!r} is not a valid {field}. Must be one of: {allowed}"
        )


class ReferenceData(BaseModel):
    """Dropdown vocabularies for every enumerated draft field."""

    incident_types: list[str] = Field(
        default=["Flood", "Landslide", "Fire", "Earthquake", "Vehicular"],
    )
    severities: list[str] = Field(
        default=["Low", "Medium", "High", "Critical"],
    )
    barangays: list[str] = Field(
        default=[
            "BOGAYO",
            "BOLISONG",
            "BOYUGAN East",
            "BOYUGAN West",
            "BUALAN",
            "DIPLO",
            "GAWIL",
            "GUSOM",
            "KITAANG DAGAT",
            "LANTAWAN",
            "LIMAMAWAN",
            "MAHAYAHAY",
            "PANGI",
            "PICANAN",
            "POBLACION",
            "SALAGMANOK",
            "SICADE",
            "SUMINALOM",
        ],
    )
    sex_gender_identity: list[str] = Field(
        default=[
            "Male",
            "Female",
            "LGBTQIA+ / Other (self-identified)",
            "Prefer not to say",
        ],
    )
    civil_status: list[str] = Field(
        default=["Single", "Married", "Widowed", "Separated", "Live-In/Cohabiting"],
    )
    position_in_family: list[str] = Field(
        default=[
            "Head (Father)",
            "Head (Mother)",
            "Head (Solo Parent)",
            "Head (Single)",
            "Head (Child)",
            "Member",
        ],
    )
    categories: list[str] = Field(
        default=[
            "Infant (0-6 mos)",
            "Toddlers (7 mos- 2 y/o)",
            "Preschooler (3-5 y/o)",
            "School Age (6-12 y/o)",
            "Teen Age (13-17 y/o)",
            "Adult (18-59 y/o)",
            "Elderly (60 and above)",
        ],
    )
    ethnicity: list[str] = Field(default=["CHRISTIAN", "SUBANEN (IPs)", "MORO"])
    vulnerable_groups: list[str] = Field(
        default=[
            "PWD",
            "Pregnant",
            "Elderly",
            "Lactating Mother",
            "Solo parent",
            "Indigenous People",
            "LGBTQIA+ Persons",
            "Child-Headed Household",
            "Victim of Gender-Based Violence (GBV)",
            "4Ps Beneficiaries",
            "Single Headed Family",
        ],
    )
    casualty: list[str] = Field(default=["Dead", "Injured/ill", "Missing"])
    pwd_types: list[str] = Field(
        default=[
            "Psychosocial Disability",
            "Hearing Disability",
            "Visual Disability",
            "Orthopedic Disability",
            "Intellectual Disability",
            "Speech and Language Disability",
            "Learning Disability",
            "Multiple Disability",
        ],
    )

    def domain_for(self, field: str) -> Optional[list[str]]:
        """Return the vocabulary for ``field``, or None for free-text fields."""
        attr = FIELD_DOMAINS.get(field)
        return getattr(self, attr) if attr else None

    def check(self, field: str, value) -> None:
        """Raise DomainValueError if ``value`` is outside the field's vocabulary.

        An empty string (or an empty list for multi-selects) always passes;
        it means "not selected yet" and is the validator's concern.
        """
        domain = self.domain_for(field)
        if domain is None:
            return
        values = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
        for v in values:
            if v == "":
                continue
            if v not in domain:
                raise DomainValueError(field, v, domain)

    def check_draft(self, draft: IncidentDraft) -> None:
        """Check every enumerated value in a whole draft (e.g. one loaded from a file).

        Raises:
            DomainValueError: For the first value outside its vocabulary.
        """
        for name in FIELD_DOMAINS:
            if name in IncidentDraft.model_fields:
                self.check(name, getattr(draft, name))
        for family in draft.families:
            for member in family.members:
                for name in FIELD_DOMAINS:
                    if name in MemberRecord.model_fields:
                        self.check(name, getattr(member, name))


def load_reference_data(path: Path | None = None) -> ReferenceData:
    """Load vocabularies, overriding defaults with the JSON file if present."""
    path = path or REFERENCE_DATA_PATH
    if not path.exists():
        logger.debug("No reference data at %s, using built-in vocabularies", path)
        return ReferenceData()
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    reference = ReferenceData.model_validate(data)
    unknown = set(reference.severities) - SEVERITY_LEVELS
    if unknown:
        logger.warning(
            "Reference data lists severities the draft model rejects: %s",
            sorted(unknown),
        )
    logger.info("Loaded reference data from %s", path)
    return reference
