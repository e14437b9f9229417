"""Collection resizing for the families and members lists.

Keeps ``families`` in step with ``total_families`` and applies the explicit
add/remove-member actions. Every function returns a new draft; families
that a resize does not touch are carried over as the same instances, so
their content is preserved exactly.

Invariants maintained:
- ``len(draft.families) == draft.total_families``
- every family has at least one member
- ``family_size == len(members)`` (computed on the model)
"""

import logging

from intake.schemas.models import (
    MAX_FAMILIES,
    MIN_FAMILIES,
    FamilyRecord,
    IncidentDraft,
    MemberRecord,
    evolve,
)

logger = logging.getLogger(__name__)


def _coerce_count(count) -> int:
    try:
        value = int(count)
    except (TypeError, ValueError):
        raise ValueError(f"Number of families must be a whole number, got {count!r}") from None
    if not MIN_FAMILIES <= value <= MAX_FAMILIES:
        raise ValueError(
            f"Number of families must be between {MIN_FAMILIES} and {MAX_FAMILIES}, got {value}"
        )
    return value


def new_family(family_number: int) -> FamilyRecord:
    """A blank family with one default member."""
    return FamilyRecord(family_number=family_number, members=[MemberRecord()])


def resize_families(draft: IncidentDraft, count) -> IncidentDraft:
    """Reconcile ``draft.families`` with a new desired family count.

    Growth appends blank families numbered after the existing ones. Shrink
    keeps the first ``count`` families and discards the rest without
    confirmation.

    Raises:
        ValueError: If ``count`` is not an integer in 1..100.
    """
    target = _coerce_count(count)
    current = len(draft.families)

    if target == current:
        if draft.total_families == target:
            return draft
        return evolve(draft, total_families=target)

    if target > current:
        families = list(draft.families) + [
            new_family(current + offset + 1) for offset in range(target - current)
        ]
        logger.debug("Families grown %d -> %d", current, target)
    else:
        dropped = draft.families[target:]
        families = list(draft.families[:target])
        logger.debug(
            "Families shrunk %d -> %d (%d members discarded)",
            current, target, sum(len(f.members) for f in dropped),
        )

    return evolve(draft, total_families=target, families=families)


def add_member(draft: IncidentDraft, family_index: int) -> IncidentDraft:
    """Append one blank member to the family at ``family_index``."""
    if not 0 <= family_index < len(draft.families):
        logger.debug("add_member: no family at index %d, ignoring", family_index)
        return draft
    family = draft.families[family_index]
    updated = evolve(family, members=list(family.members) + [MemberRecord()])
    return draft.with_family(family_index, updated)


def remove_member(draft: IncidentDraft, family_index: int, member_index: int) -> IncidentDraft:
    """Remove one member, never leaving a family empty.

    Removing the only member of a family is a no-op. When the removed
    member was the family's last displaced member, the location fields are
    re-synced so the evacuation center is cleared.
    """
    if not 0 <= family_index < len(draft.families):
        logger.debug("remove_member: no family at index %d, ignoring", family_index)
        return draft
    family = draft.families[family_index]
    if not 0 <= member_index < len(family.members):
        logger.debug(
            "remove_member: family %d has no member at index %d, ignoring",
            family.family_number, member_index,
        )
        return draft
    if len(family.members) <= 1:
        logger.debug(
            "remove_member: family %d has a single member, ignoring",
            family.family_number,
        )
        return draft

    members = [m for i, m in enumerate(family.members) if i != member_index]
    updated = evolve(family, members=members)
    return draft.with_family(family_index, updated)
