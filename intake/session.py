"""One intake flow: draft, wizard step and submission, owned together.

An ``IntakeSession`` is created when the report form opens and is closed
either by an accepted submission (``on_success``) or by cancellation
(``on_close``). Closing discards the draft; nothing is persisted. Each
session owns its draft exclusively, so the only concurrency guard needed
is the pipeline's in-flight flag.
"""

import logging
from collections.abc import Callable
from typing import Optional

from intake.draft.binding import FieldPath, set_field
from intake.draft.resizer import add_member, remove_member, resize_families
from intake.notifications import Notifier
from intake.reference import ReferenceData
from intake.schemas.models import IncidentDraft
from intake.stepper import Step, StepController
from intake.submission.pipeline import SubmissionOutcome, SubmissionPipeline, SubmissionResult

logger = logging.getLogger(__name__)


class SessionClosedError(RuntimeError):
    """Raised when a closed session is edited or submitted."""


class StepError(RuntimeError):
    """Raised when submitting before reaching the family details step."""


class IntakeSession:
    """Edit-validate-submit loop for a single incident report.

    Args:
        pipeline: Submission pipeline (client + notifier).
        notifier: Notifier for step-gating messages. Should be the same
                  one the pipeline uses.
        reference: Vocabularies that enumerated fields are checked against.
        draft: Starting draft; a fresh default draft when omitted.
        on_success: Called after the server accepts the report.
        on_close: Called when the user abandons the flow.
    """

    def __init__(
        self,
        pipeline: SubmissionPipeline,
        notifier: Notifier | None = None,
        reference: Optional[ReferenceData] = None,
        draft: Optional[IncidentDraft] = None,
        on_success: Callable[[], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ):
        self._pipeline = pipeline
        self._reference = reference
        self._draft: Optional[IncidentDraft] = draft if draft is not None else IncidentDraft()
        self._steps = StepController(notifier)
        self._on_success = on_success
        self._on_close = on_close

    @property
    def closed(self) -> bool:
        return self._draft is None

    @property
    def draft(self) -> IncidentDraft:
        return self._require_open()

    @property
    def step(self) -> Step:
        return self._steps.step

    @property
    def submitting(self) -> bool:
        return self._pipeline.in_flight

    def _require_open(self) -> IncidentDraft:
        if self._draft is None:
            raise SessionClosedError("This intake session has been closed")
        return self._draft

    # -- Editing ------------------------------------------------------------

    def set(self, path: str | FieldPath, value) -> IncidentDraft:
        self._draft = set_field(self._require_open(), path, value, self._reference)
        return self._draft

    def set_family_count(self, count) -> IncidentDraft:
        self._draft = resize_families(self._require_open(), count)
        return self._draft

    def add_member(self, family_index: int) -> IncidentDraft:
        self._draft = add_member(self._require_open(), family_index)
        return self._draft

    def remove_member(self, family_index: int, member_index: int) -> IncidentDraft:
        self._draft = remove_member(self._require_open(), family_index, member_index)
        return self._draft

    # -- Navigation ---------------------------------------------------------

    def advance(self) -> bool:
        return self._steps.advance(self._require_open())

    def back(self) -> Step:
        self._require_open()
        return self._steps.back()

    # -- Exit ---------------------------------------------------------------

    async def submit(self) -> SubmissionResult:
        """Submit the draft; closes the session when the server accepts it."""
        draft = self._require_open()
        if not self._steps.can_submit:
            raise StepError("Submission is only available from the family details step")

        result = await self._pipeline.submit(draft)
        if result.outcome is SubmissionOutcome.ACCEPTED:
            self._close()
            if self._on_success:
                self._on_success()
        return result

    def cancel(self) -> None:
        """Abandon the flow, discarding the draft."""
        if self.closed:
            return
        if self._pipeline.in_flight:
            logger.warning("Cancelling while a submission is outstanding")
        self._close()
        logger.info("Intake session cancelled, draft discarded")
        if self._on_close:
            self._on_close()

    def _close(self) -> None:
        self._draft = None
        self._steps.reset()
