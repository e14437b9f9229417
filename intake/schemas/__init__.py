"""Pydantic v2 schema models for the incident-intake draft.

Provides the three nested draft models:
- IncidentDraft: root aggregate and unit of submission
- FamilyRecord: one family unit with its location fields
- MemberRecord: one person inside a family

All models are frozen; use ``evolve()`` to derive edited copies.
"""

from intake.schemas.models import (
    DISPLACED_VALUES,
    MAX_FAMILIES,
    MIN_FAMILIES,
    PWD_GROUP,
    SEVERITY_LEVELS,
    FamilyRecord,
    IncidentDraft,
    MemberRecord,
    evolve,
)

__all__ = [
    "DISPLACED_VALUES",
    "MAX_FAMILIES",
    "MIN_FAMILIES",
    "PWD_GROUP",
    "SEVERITY_LEVELS",
    "FamilyRecord",
    "IncidentDraft",
    "MemberRecord",
    "evolve",
]
