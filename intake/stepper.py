"""Two-step wizard sequencer for the intake form.

States:
  BASIC_INFO      -- incident type, title, location, barangay, ...
  FAMILY_DETAILS  -- families and members; submission is only reachable here

Transitions:
  BASIC_INFO -> FAMILY_DETAILS: validate_basic_info returns no missing fields
  FAMILY_DETAILS -> BASIC_INFO: always allowed

A refused forward transition reports every missing label in one message
through the notifier and stays on BASIC_INFO. Family details content never
affects the forward gate.
"""

import enum
import logging

from intake.notifications import Notifier
from intake.schemas.models import IncidentDraft
from intake.validation import basic_info_failure, validate_basic_info

logger = logging.getLogger(__name__)


class Step(enum.Enum):
    """Wizard steps, in order."""

    BASIC_INFO = 1
    FAMILY_DETAILS = 2


class StepController:
    """Step state machine gated on basic-information validation.

    Args:
        notifier: Where refused transitions are reported. Defaults to a
                  logging-only Notifier.
    """

    def __init__(self, notifier: Notifier | None = None):
        self._notifier = notifier or Notifier()
        self._step = Step.BASIC_INFO

    @property
    def step(self) -> Step:
        return self._step

    @property
    def can_submit(self) -> bool:
        return self._step is Step.FAMILY_DETAILS

    def advance(self, draft: IncidentDraft) -> bool:
        """Move BASIC_INFO -> FAMILY_DETAILS if the basic fields are filled.

        Returns:
            True if the controller is on FAMILY_DETAILS afterwards.
        """
        if self._step is Step.FAMILY_DETAILS:
            logger.debug("advance: already on the last step")
            return True

        missing = validate_basic_info(draft)
        if missing:
            failure = basic_info_failure(missing)
            self._notifier.error(failure.title, failure.message)
            logger.info("Step BASIC_INFO -> FAMILY_DETAILS refused, missing: %s", ", ".join(missing))
            return False

        self._step = Step.FAMILY_DETAILS
        logger.info("Step BASIC_INFO -> FAMILY_DETAILS")
        return True

    def back(self) -> Step:
        """Return to BASIC_INFO unconditionally."""
        if self._step is Step.FAMILY_DETAILS:
            self._step = Step.BASIC_INFO
            logger.info("Step FAMILY_DETAILS -> BASIC_INFO")
        return self._step

    def reset(self) -> None:
        self._step = Step.BASIC_INFO
