"""HTML email bodies for claim lifecycle notifications."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import TYPE_CHECKING, Final

from venue_claims.domain.model import NotificationTemplate

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

BRAND: Final[str] = "MyThirdPlace"

SUBJECTS: Final[dict[NotificationTemplate, str]] = {
    NotificationTemplate.RECEIVED: f"Venue Ownership Claim Received - {BRAND}",
    NotificationTemplate.DOCUMENTS_REQUESTED: "Additional Documentation Required - Venue Claim",
    NotificationTemplate.APPROVED: f"Congratulations! Your Venue Claim Approved - {BRAND}",
    NotificationTemplate.REJECTED: f"Venue Claim Update - {BRAND}",
}

_SIGN_OFF = f"<p>Best regards,<br/>The {BRAND} Team</p>"


class UnknownTemplateError(KeyError):
    """Raised when no body is registered for a template."""


@dataclass(frozen=True, slots=True)
class RenderedMessage:
    subject: str
    html: str


def _param(params: Mapping[str, object], key: str) -> str:
    value = params.get(key)
    return escape(str(value)) if value is not None else ""


def _wrap(heading: str, *paragraphs: str) -> str:
    body = "\n".join(paragraphs)
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">\n'
        f'<h2 style="color: #006548;">{heading}</h2>\n'
        f"{body}\n"
        f"{_SIGN_OFF}\n"
        "</div>"
    )


def _received(params: Mapping[str, object]) -> str:
    return _wrap(
        "Claim Received",
        f"<p>Dear {_param(params, 'claimant_name')},</p>",
        f"<p>Thank you for claiming your venue listing on {BRAND}. "
        "We have received your ownership claim for:</p>",
        f"<p><strong>{_param(params, 'venue_name')}</strong><br/>"
        f"Claim ID: {_param(params, 'claim_id')}</p>",
        "<p>Our team will review your submission and supporting documents within "
        "24-48 hours. You will receive an email once your claim has been processed.</p>",
    )


def _documents_requested(params: Mapping[str, object]) -> str:
    return _wrap(
        "Additional Documentation Needed",
        f"<p>Dear {_param(params, 'claimant_name')},</p>",
        "<p>We are reviewing your ownership claim for "
        f"<strong>{_param(params, 'venue_name')}</strong>.</p>",
        "<p>To complete the verification we need the following:</p>",
        f"<p>{_param(params, 'requested_documents')}</p>",
        "<p>Please reply to this email with the requested documents or information.</p>",
    )


def _approved(params: Mapping[str, object]) -> str:
    venue_url = _param(params, "venue_url")
    return _wrap(
        "Your Claim Has Been Approved!",
        f"<p>Dear {_param(params, 'claimant_name')},</p>",
        "<p>Great news! Your ownership claim for "
        f"<strong>{_param(params, 'venue_name')}</strong> has been approved.</p>",
        "<p><strong>Verified Business</strong><br/>"
        "Your venue now displays a verified business badge.</p>",
        f'<p><a href="{venue_url}">Manage Your Venue</a></p>',
        f"<p>Welcome to the {BRAND} business community!</p>",
    )


def _rejected(params: Mapping[str, object]) -> str:
    reason = _param(params, "reason")
    reason_block = f"<p><strong>Reason:</strong><br/>{reason}</p>" if reason else ""
    return _wrap(
        "Claim Status Update",
        f"<p>Dear {_param(params, 'claimant_name')},</p>",
        "<p>Thank you for your interest in claiming "
        f"<strong>{_param(params, 'venue_name')}</strong>.</p>",
        "<p>After careful review, we were unable to verify your ownership claim at this time.</p>",
        reason_block,
        "<p>You may submit a new claim with additional documentation that demonstrates "
        "your ownership or authority to manage this venue.</p>",
    )


_BODIES: Final[dict[NotificationTemplate, Callable[[Mapping[str, object]], str]]] = {
    NotificationTemplate.RECEIVED: _received,
    NotificationTemplate.DOCUMENTS_REQUESTED: _documents_requested,
    NotificationTemplate.APPROVED: _approved,
    NotificationTemplate.REJECTED: _rejected,
}


def render(template: NotificationTemplate | str, params: Mapping[str, object]) -> RenderedMessage:
    """Render ``template`` with ``params``; values are HTML-escaped."""

    try:
        key = NotificationTemplate(template)
    except ValueError as exc:
        raise UnknownTemplateError(template) from exc
    return RenderedMessage(subject=SUBJECTS[key], html=_BODIES[key](params))
