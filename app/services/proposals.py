# =============================================================================
# Proposal Service — Validation and Record Shaping
# =============================================================================
#
# Sits between the HTTP handlers and the repository:
#   HTTP form → ProposalForm → validate → stored fields → ProposalStore
#
# DESIGN DECISION: Validation happens here, before any store call.
# MongoDB enforces no schema, so required fields and attachment content
# types are checked explicitly. A request with one bad attachment writes
# nothing at all.
#
# UPDATE SEMANTICS: Every text field is written on update. Fields the
# client omits are removed from the record, so an update that leaves out
# `notes` clears it. Attachments are the exception: they are replaced only
# when a new file is supplied. This is overwrite, not merge.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.db.models import (
    NOTES_DEFAULT,
    REQUIRED_TEXT_FIELDS,
    TEXT_FIELDS,
    Attachment,
    AttachmentKind,
)
from app.db.repository import ProposalStore
from app.services.errors import ProposalNotFoundError, ProposalValidationError

logger = logging.getLogger(__name__)

PROPOSAL_NOT_FOUND = "Proposal not found"

INVALID_TYPE_MESSAGES = {
    AttachmentKind.DOCUMENT: (
        "Invalid document file type. Only PDF and Word documents are allowed."
    ),
    AttachmentKind.IMAGE: "Invalid image file type. Only images are allowed.",
}


@dataclass
class ProposalForm:
    """
    One create/update submission, as parsed from the multipart body.

    Text fields are None when the client did not send them at all, which
    matters for update (None → field removed).
    """

    name: str | None = None
    yeshiva: str | None = None
    shadchan: str | None = None
    details: str | None = None
    notes: str | None = None
    document_file: Attachment | None = None
    image_file: Attachment | None = None

    def attachments(self) -> dict[AttachmentKind, Attachment]:
        """Supplied attachments keyed by slot."""
        supplied = {
            AttachmentKind.DOCUMENT: self.document_file,
            AttachmentKind.IMAGE: self.image_file,
        }
        return {kind: att for kind, att in supplied.items() if att is not None}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_required_fields(form: ProposalForm) -> None:
    """
    Reject a creation that is missing any required text field.

    All missing fields are reported in one message.
    """
    missing = [
        field for field in REQUIRED_TEXT_FIELDS
        if not (getattr(form, field) or "").strip()
    ]
    if missing:
        reasons = ", ".join(f"{field}: Path `{field}` is required." for field in missing)
        raise ProposalValidationError(f"Proposal validation failed: {reasons}")


def validate_attachment(
    kind: AttachmentKind,
    attachment: Attachment,
    max_bytes: int,
) -> None:
    """Check content type against the slot, and size against the cap."""
    if not kind.accepts(attachment.content_type or ""):
        raise ProposalValidationError(INVALID_TYPE_MESSAGES[kind])
    if len(attachment.data) > max_bytes:
        raise ProposalValidationError("File too large")


# ---------------------------------------------------------------------------
# Record shaping
# ---------------------------------------------------------------------------


def build_new_record(form: ProposalForm) -> dict[str, Any]:
    """Stored fields for a new proposal. `notes` falls back to ""."""
    record: dict[str, Any] = {
        field: getattr(form, field) for field in REQUIRED_TEXT_FIELDS
    }
    record["notes"] = form.notes if form.notes is not None else NOTES_DEFAULT
    for kind, attachment in form.attachments().items():
        record[kind.value] = attachment.to_document()
    return record


def build_update(form: ProposalForm) -> tuple[dict[str, Any], list[str]]:
    """
    Split an update into ($set, $unset) parts.

    Supplied text fields are set and omitted ones unset. Attachment slots
    are only ever set, never unset.
    """
    set_fields: dict[str, Any] = {}
    unset_fields: list[str] = []
    for field in TEXT_FIELDS:
        value = getattr(form, field)
        if value is None:
            unset_fields.append(field)
        else:
            set_fields[field] = value
    for kind, attachment in form.attachments().items():
        set_fields[kind.value] = attachment.to_document()
    return set_fields, unset_fields


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ProposalService:
    """CRUD over proposals, with validation ahead of every write."""

    def __init__(self, store: ProposalStore, max_upload_bytes: int) -> None:
        self._store = store
        self._max_upload_bytes = max_upload_bytes

    def _validate_attachments(self, form: ProposalForm) -> None:
        for kind, attachment in form.attachments().items():
            validate_attachment(kind, attachment, self._max_upload_bytes)

    async def create(self, form: ProposalForm) -> str:
        self._validate_attachments(form)
        validate_required_fields(form)

        proposal_id = await self._store.insert(build_new_record(form))
        logger.info(
            "Created proposal %s (attachments: %s)",
            proposal_id,
            [kind.value for kind in form.attachments()] or "none",
        )
        return proposal_id

    async def list_all(self) -> list[dict[str, Any]]:
        return await self._store.list_summaries()

    async def get(self, proposal_id: str) -> dict[str, Any]:
        record = await self._store.get(proposal_id)
        if record is None:
            raise ProposalNotFoundError(PROPOSAL_NOT_FOUND)
        return record

    async def get_attachment(
        self, proposal_id: str, kind: AttachmentKind,
    ) -> Attachment:
        attachment = Attachment.from_document(
            await self._store.get_attachment(proposal_id, kind)
        )
        if attachment is None:
            raise ProposalNotFoundError(f"{kind.label} not found")
        return attachment

    async def update(self, proposal_id: str, form: ProposalForm) -> None:
        self._validate_attachments(form)

        set_fields, unset_fields = build_update(form)
        if unset_fields:
            # Omitted fields are cleared, not kept.
            logger.warning(
                "Update of proposal %s omits %s; clearing them",
                proposal_id, unset_fields,
            )
        if not await self._store.update(proposal_id, set_fields, unset_fields):
            raise ProposalNotFoundError(PROPOSAL_NOT_FOUND)
        logger.info("Updated proposal %s", proposal_id)

    async def delete(self, proposal_id: str) -> None:
        if not await self._store.delete(proposal_id):
            raise ProposalNotFoundError(PROPOSAL_NOT_FOUND)
        logger.info("Deleted proposal %s", proposal_id)
