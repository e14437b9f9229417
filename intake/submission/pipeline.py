"""Submission pipeline: validate, confirm, serialize, write, interpret.

Outcomes of ``SubmissionPipeline.submit`` (mutually exclusive):

  ACCEPTED           -- 2xx and the server did not report success: false
  SERVER_REJECTED    -- structured per-field errors from the server
  FAILED             -- transport failure, malformed body, any other error
  VALIDATION_FAILED  -- local validation failed; nothing was sent
  CANCELLED          -- the user declined the confirmation; nothing was sent
  IN_PROGRESS        -- another submit of this pipeline is still outstanding

Every network-side failure is caught here and turned into a notification
plus a result; nothing propagates to the host. There are no retries.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from intake.notifications import Notifier
from intake.schemas.models import IncidentDraft
from intake.submission.client import ApiResponse, IncidentApiClient, TransportError
from intake.submission.wire import ConfirmationSummary, serialize_draft
from intake.validation import validate_complete

logger = logging.getLogger(__name__)

CONNECTION_ERROR_TITLE = "Connection Error"
CONNECTION_ERROR_MESSAGE = (
    "Failed to connect to server. Please check your internet connection and try again."
)
SERVER_VALIDATION_TITLE = "Validation Error"
SERVER_VALIDATION_FALLBACK = "Please check all required fields and try again."


class SubmissionOutcome(enum.Enum):
    ACCEPTED = "accepted"
    SERVER_REJECTED = "server_rejected"
    FAILED = "failed"
    VALIDATION_FAILED = "validation_failed"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class SubmissionResult:
    """Result of one submit attempt."""

    outcome: SubmissionOutcome
    title: str = ""
    message: str = ""
    ack: Optional[dict] = None

    @property
    def ok(self) -> bool:
        return self.outcome is SubmissionOutcome.ACCEPTED


def _server_field_errors(response: ApiResponse) -> Optional[str]:
    """Aggregate structured field errors from a rejection body, if present."""
    body = response.body
    errors = body.get("errors")
    if response.status == 422 and isinstance(errors, dict):
        messages = []
        for value in errors.values():
            if isinstance(value, (list, tuple)):
                messages.extend(str(m) for m in value)
            else:
                messages.append(str(value))
        return "\n".join(messages) if messages else SERVER_VALIDATION_FALLBACK

    validation_errors = body.get("validation_errors")
    if isinstance(validation_errors, list) and validation_errors:
        lines = []
        for error in validation_errors:
            if not isinstance(error, dict):
                lines.append(str(error))
                continue
            messages = error.get("messages") or []
            if isinstance(messages, str):
                messages = [messages]
            lines.append(f"{error.get('field', 'unknown')}: {', '.join(str(m) for m in messages)}")
        return "\n".join(lines)
    return None


def interpret_response(response: ApiResponse) -> SubmissionResult:
    """Classify a completed HTTP response into a submission result."""
    if response.ok and response.body.get("success", True) is not False:
        return SubmissionResult(
            outcome=SubmissionOutcome.ACCEPTED,
            title="Incident Reported Successfully!",
            message="Your incident has been reported with detailed family information.",
            ack=response.body,
        )

    field_errors = None if response.ok else _server_field_errors(response)
    if field_errors is not None:
        return SubmissionResult(
            outcome=SubmissionOutcome.SERVER_REJECTED,
            title=SERVER_VALIDATION_TITLE,
            message=field_errors,
        )

    detail = (
        response.body.get("error")
        or response.body.get("message")
        or "Unknown error occurred"
    )
    return SubmissionResult(
        outcome=SubmissionOutcome.FAILED,
        title="Error",
        message=f"Failed to report incident: {detail}",
    )


class SubmissionPipeline:
    """Submits one draft at a time through an IncidentApiClient.

    Args:
        client: The HTTP client (carries the bearer token provider).
        notifier: Presentation of confirmations and outcomes.
    """

    def __init__(self, client: IncidentApiClient, notifier: Notifier | None = None):
        self._client = client
        self._notifier = notifier or Notifier()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """True while a write is outstanding; the submit control is disabled."""
        return self._in_flight

    async def submit(self, draft: IncidentDraft) -> SubmissionResult:
        if self._in_flight:
            logger.warning("Submit ignored: a submission is already in progress")
            return SubmissionResult(
                outcome=SubmissionOutcome.IN_PROGRESS,
                message="A submission is already in progress.",
            )

        failures = validate_complete(draft)
        if failures:
            failure = failures[0]
            self._notifier.error(failure.title, failure.message)
            return SubmissionResult(
                outcome=SubmissionOutcome.VALIDATION_FAILED,
                title=failure.title,
                message=failure.message,
            )

        summary = ConfirmationSummary.from_draft(draft)
        confirmed = self._notifier.confirm(
            "Confirm Incident Report",
            summary.render(),
            "Yes, Report Incident",
            "Review Details",
        )
        if not confirmed:
            logger.info("Submission cancelled at confirmation")
            return SubmissionResult(outcome=SubmissionOutcome.CANCELLED)

        self._in_flight = True
        try:
            self._notifier.processing(
                "Reporting Incident",
                "Please wait while we save your incident report...",
            )
            payload = serialize_draft(draft)
            logger.info(
                "Submitting incident '%s' (%d families, %d persons)",
                draft.title, payload["affected_families"], payload["affected_individuals"],
            )
            try:
                response = await self._client.post_incident(payload)
            except TransportError as e:
                logger.error("Submission failed: %s", e)
                result = SubmissionResult(
                    outcome=SubmissionOutcome.FAILED,
                    title=CONNECTION_ERROR_TITLE,
                    message=CONNECTION_ERROR_MESSAGE,
                )
            else:
                result = interpret_response(response)
        finally:
            self._notifier.close()
            self._in_flight = False

        if result.ok:
            logger.info("Incident accepted by server")
            self._notifier.success(result.title, result.message)
        else:
            logger.warning("Incident not accepted (%s): %s", result.outcome.value,
                           result.message.replace("\n", "; "))
            self._notifier.error(result.title, result.message)
        return result
