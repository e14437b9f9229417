"""Incident submission: wire serialization, HTTP client and pipeline."""

from intake.submission.client import ApiResponse, IncidentApiClient, TransportError
from intake.submission.pipeline import (
    SubmissionOutcome,
    SubmissionPipeline,
    SubmissionResult,
    interpret_response,
)
from intake.submission.wire import ConfirmationSummary, format_instant, serialize_draft

__all__ = [
    "ApiResponse",
    "ConfirmationSummary",
    "IncidentApiClient",
    "SubmissionOutcome",
    "SubmissionPipeline",
    "SubmissionResult",
    "TransportError",
    "format_instant",
    "interpret_response",
    "serialize_draft",
]
