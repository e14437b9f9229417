"""Incident intake -- command-line front end.

Drives the intake core from a JSON draft file, the same way the report
form drives it interactively: basic-info gate, complete validation,
confirmation, one authenticated write.

Usage:
    python -m intake.main --template > draft.json   # Blank draft to fill in
    python -m intake.main --draft draft.json --validate
    python -m intake.main --draft draft.json --payload   # Show the wire payload
    python -m intake.main --draft draft.json --summary   # Show the confirmation summary
    python -m intake.main --draft draft.json --submit    # Confirm, then POST
    python -m intake.main --draft draft.json --submit --yes
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from intake.config import load_config, resolve_token
from intake.notifications import ConsoleNotifier
from intake.reference import DomainValueError, load_reference_data
from intake.schemas.models import IncidentDraft
from intake.session import IntakeSession
from intake.submission.client import IncidentApiClient
from intake.submission.pipeline import SubmissionPipeline
from intake.submission.wire import ConfirmationSummary, serialize_draft
from intake.validation import validate_complete

logger = logging.getLogger(__name__)


def load_draft(path: Path) -> IncidentDraft:
    """Read and validate a draft JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return IncidentDraft.model_validate(data)


def print_template() -> None:
    """Print a blank one-family draft as JSON."""
    draft = IncidentDraft()
    print(draft.model_dump_json(indent=2))


def validate_only(draft: IncidentDraft) -> int:
    failures = validate_complete(draft)
    if not failures:
        summary = ConfirmationSummary.from_draft(draft)
        print(f"\nDraft is valid: {summary.families} families, {summary.persons} persons.")
        return 0
    for failure in failures:
        print(f"\n[INVALID] {failure.title}\n{failure.message}")
    return 1


def run_submit(config: dict, draft: IncidentDraft, assume_yes: bool, reference) -> int:
    notifier = ConsoleNotifier(assume_yes=assume_yes)
    client = IncidentApiClient(config, token_provider=lambda: resolve_token(config))
    pipeline = SubmissionPipeline(client, notifier)
    session = IntakeSession(pipeline, notifier=notifier, reference=reference, draft=draft)

    if not session.advance():
        return 1
    result = asyncio.run(session.submit())
    return 0 if result.ok else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Incident intake -- validate and submit barangay incident reports"
    )
    parser.add_argument("--draft", type=Path, help="Draft JSON file")
    parser.add_argument("--template", action="store_true", help="Print a blank draft and exit")
    parser.add_argument("--validate", action="store_true", help="Validate the draft only")
    parser.add_argument("--payload", action="store_true", help="Print the submission payload")
    parser.add_argument("--summary", action="store_true", help="Print the confirmation summary")
    parser.add_argument("--submit", action="store_true", help="Submit the draft to the API")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--config", type=Path, help="Config file (default: config/intake_config.json)")
    parser.add_argument("--reference", type=Path, help="Reference vocabulary JSON override")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.template:
        print_template()
        return

    if not args.draft:
        parser.error("--draft is required unless --template is given")

    try:
        draft = load_draft(args.draft)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: cannot read draft {args.draft}: {e}")
        sys.exit(2)
    except ValidationError as e:
        print(f"Error: draft {args.draft} is not a valid incident draft:\n{e}")
        sys.exit(2)

    if args.summary:
        print(ConfirmationSummary.from_draft(draft).render())
        return

    if args.payload:
        print(json.dumps(serialize_draft(draft), indent=2, ensure_ascii=False))
        return

    reference = load_reference_data(args.reference)
    try:
        reference.check_draft(draft)
    except DomainValueError as e:
        print(f"Error: {e}")
        sys.exit(2)

    if args.submit:
        config = load_config(args.config)
        sys.exit(run_submit(config, draft, args.yes, reference))

    sys.exit(validate_only(draft))


if __name__ == "__main__":
    main()
