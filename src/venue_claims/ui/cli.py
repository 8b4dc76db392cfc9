from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from venue_claims.app import (
    decide_claim,
    flush_notifications,
    get_claim,
    list_claims,
    reconcile,
    register_venue,
    request_claim_documents,
    submit_claim,
)
from venue_claims.config import configure_logging
from venue_claims.domain.claims import QueueReport
from venue_claims.domain.errors import ValidationError
from venue_claims.domain.model import BusinessRole, ClaimStatus
from venue_claims.ui.forms import ClaimForm, EvidenceUpload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from venue_claims.domain.model import Claim

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Venue ownership claims")
    subparsers = parser.add_subparsers(dest="command", required=True)

    venue = subparsers.add_parser("venue", help="Venue listing commands")
    venue_sub = venue.add_subparsers(dest="venue_command", required=True)
    venue_add = venue_sub.add_parser("add", help="Register an unclaimed venue")
    venue_add.add_argument("--name", type=str, required=True, help="Venue display name")
    venue_add.add_argument("--category", type=str, help="Optional venue category")

    claim = subparsers.add_parser("claim", help="Claim commands")
    claim_sub = claim.add_subparsers(dest="claim_command", required=True)

    submit = claim_sub.add_parser("submit", help="Submit an ownership claim")
    submit.add_argument("--venue-id", type=str, required=True)
    submit.add_argument("--claimant-id", type=str, required=True)
    submit.add_argument("--claimant-name", type=str, required=True)
    submit.add_argument("--claimant-email", type=str, required=True)
    submit.add_argument("--business-name", type=str, required=True)
    submit.add_argument("--business-email", type=str, required=True)
    submit.add_argument("--business-phone", type=str, required=True)
    submit.add_argument(
        "--role",
        type=str,
        choices=[role.value for role in BusinessRole],
        default=BusinessRole.OWNER.value,
        help="Claimant's role at the business (default: %(default)s)",
    )
    submit.add_argument("--address", type=str, default="", help="Business address")
    submit.add_argument(
        "--reason",
        type=str,
        required=True,
        help="Why the claimant should manage this listing (50-1000 characters)",
    )
    submit.add_argument("--additional-info", type=str, default="")
    submit.add_argument(
        "--document",
        dest="documents",
        action="append",
        default=[],
        help="Evidence file (image or PDF, max 10MB); repeat for up to 5 files",
    )

    claim_list = claim_sub.add_parser("list", help="List claims, most recent first")
    claim_list.add_argument(
        "--status",
        type=str,
        choices=[*(status.value for status in ClaimStatus), "all"],
        default=ClaimStatus.PENDING.value,
    )
    claim_list.add_argument("--limit", type=int, default=50)

    show = claim_sub.add_parser("show", help="Show one claim")
    show.add_argument("claim_id", type=str)

    approve = claim_sub.add_parser("approve", help="Approve a pending claim")
    approve.add_argument("claim_id", type=str)
    approve.add_argument("--admin-id", type=str, required=True)
    approve.add_argument("--notes", type=str, default="")

    reject = claim_sub.add_parser("reject", help="Reject a pending claim")
    reject.add_argument("claim_id", type=str)
    reject.add_argument("--admin-id", type=str, required=True)
    reject.add_argument("--reason", type=str, required=True)

    request_docs = claim_sub.add_parser(
        "request-documents", help="Ask the claimant for additional documentation"
    )
    request_docs.add_argument("claim_id", type=str)
    request_docs.add_argument("--admin-id", type=str, required=True)
    request_docs.add_argument("--requested", type=str, required=True)

    notifications = subparsers.add_parser("notifications", help="Notification outbox commands")
    notifications_sub = notifications.add_subparsers(dest="notifications_command", required=True)
    flush = notifications_sub.add_parser("flush", help="Retry undelivered notifications")
    flush.add_argument("--limit", type=int, default=100)

    reconcile_cmd = subparsers.add_parser(
        "reconcile", help="Repair venue ownership state after partial transitions"
    )
    reconcile_cmd.add_argument(
        "--venue-id",
        type=str,
        help="Reconcile one venue instead of the open reconciliation queue",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _build_claim_form(args: argparse.Namespace) -> ClaimForm:
    documents = [EvidenceUpload.from_path(Path(raw)) for raw in args.documents]
    return ClaimForm(
        claimant_name=args.claimant_name,
        claimant_email=args.claimant_email,
        business_name=args.business_name,
        business_email=args.business_email,
        business_phone=args.business_phone,
        business_role=args.role,
        business_address=args.address,
        claim_reason=args.reason,
        additional_info=args.additional_info,
        documents=documents,
    )


def _describe(claim: Claim) -> str:
    processed = f", processed {claim.processed_at:%Y-%m-%d} by {claim.processed_by}"
    return (
        f"{claim.id} [{claim.status}] {claim.venue_name} <- {claim.claimant_name} "
        f"({claim.business_role}, {claim.business_email}), submitted "
        f"{claim.submitted_at:%Y-%m-%d %H:%M}"
        + (processed if claim.processed_at else "")
    )


def _prepare(args: argparse.Namespace) -> Callable[[], None]:  # noqa: C901
    """Validate the arguments and return the command to run."""

    if args.command == "venue" and args.venue_command == "add":

        def add_venue() -> None:
            venue = register_venue(name=args.name, category=args.category)
            log.info("Registered venue %s", venue.id)

        return add_venue

    if args.command == "claim" and args.claim_command == "submit":
        venue_id = _parse_uuid(args.venue_id)
        form = _build_claim_form(args)

        def submit() -> None:
            claim_id = submit_claim(
                venue_id=venue_id,
                claimant_id=args.claimant_id,
                details=form.to_details(),
                evidence=form.to_evidence(),
            )
            log.info("Submitted claim %s", claim_id)

        return submit

    if args.command == "claim" and args.claim_command == "list":
        status = None if args.status == "all" else ClaimStatus(args.status)

        def show_list() -> None:
            claims = list_claims(status=status, limit=args.limit)
            for claim in claims:
                log.info("%s", _describe(claim))
            log.info("%s claim(s)", len(claims))

        return show_list

    if args.command == "claim" and args.claim_command == "show":
        claim_id = _parse_uuid(args.claim_id)

        def show() -> None:
            claim = get_claim(claim_id)
            log.info("%s", _describe(claim))
            log.info("Reason: %s", claim.claim_reason)
            for document in claim.evidence_documents:
                log.info("Evidence: %s -> %s", document.name, document.url)
            if claim.rejection_reason:
                log.info("Rejection reason: %s", claim.rejection_reason)

        return show

    if args.command == "claim" and args.claim_command in {"approve", "reject"}:
        claim_id = _parse_uuid(args.claim_id)
        outcome = ClaimStatus.APPROVED if args.claim_command == "approve" else ClaimStatus.REJECTED
        notes = args.notes if outcome is ClaimStatus.APPROVED else args.reason

        def decide() -> None:
            claim = decide_claim(claim_id, outcome, admin_id=args.admin_id, notes=notes)
            log.info("Claim %s is now %s", claim.id, claim.status)

        return decide

    if args.command == "claim" and args.claim_command == "request-documents":
        claim_id = _parse_uuid(args.claim_id)

        def request_documents() -> None:
            request_claim_documents(claim_id, admin_id=args.admin_id, requested=args.requested)
            log.info("Requested additional documents for claim %s", claim_id)

        return request_documents

    if args.command == "notifications" and args.notifications_command == "flush":

        def flush() -> None:
            report = flush_notifications(limit=args.limit)
            log.info(
                "Notifications flushed: delivered=%s, failed=%s",
                report.delivered,
                report.failed,
            )

        return flush

    if args.command == "reconcile":
        venue_id = _parse_uuid(args.venue_id) if args.venue_id else None

        def run_reconcile() -> None:
            report = reconcile(venue_id)
            if isinstance(report, QueueReport):
                log.info(
                    "Reconciled %s venue(s), %s changed", len(report.reports), report.changed_count
                )
                return
            log.info(
                "Venue %s: %s, pending=%s, owner=%s",
                report.venue_id,
                report.claim_status,
                report.pending_claims_count,
                report.owner_id,
            )

        return run_reconcile

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        command = _prepare(parsed_args)
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        command()
    except ValidationError:
        log.exception("Request rejected")
        sys.exit(2)
    except Exception:
        log.exception("Claim command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load .env, trap Ctrl+C, run the CLI."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
