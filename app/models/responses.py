# =============================================================================
# API Response Models — Pydantic V2 Schemas
# =============================================================================
#
# These models define the shape of data coming OUT of the API.
#
# DESIGN DECISION: snake_case in Python, camelCase on the wire.
# `alias_generator=to_camel` renders `created_at` as `createdAt` and
# `document_file` as `documentFile`, matching the stored field names that
# existing clients already read. FastAPI serializes response models by
# alias by default.
#
# DESIGN DECISION: Separate summary and full models.
# Listings use ProposalSummaryResponse, which has no attachment fields at
# all, so attachment bytes cannot leak into a list response even if the
# store returned them.
# =============================================================================

import base64
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from app.db.models import NOTES_DEFAULT, Attachment, AttachmentKind

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


class HealthResponse(BaseModel):
    """Response for GET /health — confirms the API is running."""

    status: str = "ok"
    version: str
    service: str


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str


class MessageResponse(BaseModel):
    """Success indicator for update and delete."""

    message: str


class ProposalCreatedResponse(BaseModel):
    """Response for POST /proposals."""

    message: str = "Proposal created successfully"
    id: str


class AttachmentResponse(BaseModel):
    """Attachment metadata plus content; `data` is base64 in JSON."""

    model_config = _CAMEL_CONFIG

    filename: str | None = None
    content_type: str | None = None
    data: bytes

    @field_serializer("data", when_used="json")
    def _data_as_base64(self, data: bytes) -> str:
        # Standard alphabet (`+`, `/`) with padding.
        return base64.b64encode(data).decode("ascii")

    @classmethod
    def from_attachment(cls, attachment: Attachment | None) -> "AttachmentResponse | None":
        if attachment is None:
            return None
        return cls(
            filename=attachment.filename,
            content_type=attachment.content_type,
            data=attachment.data,
        )


class ProposalSummaryResponse(BaseModel):
    """
    Proposal metadata without attachments. Used by GET /proposals.

    Text fields are optional because an update that omits a field removes
    it from the record.
    """

    model_config = _CAMEL_CONFIG

    id: str
    name: str | None = None
    yeshiva: str | None = None
    shadchan: str | None = None
    details: str | None = None
    notes: str = NOTES_DEFAULT
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def _fields_from_document(raw: dict[str, Any]) -> dict[str, Any]:
        notes = raw.get("notes")
        return {
            "id": str(raw["_id"]),
            "name": raw.get("name"),
            "yeshiva": raw.get("yeshiva"),
            "shadchan": raw.get("shadchan"),
            "details": raw.get("details"),
            "notes": NOTES_DEFAULT if notes is None else notes,
            "created_at": raw.get("createdAt"),
            "updated_at": raw.get("updatedAt"),
        }

    @classmethod
    def from_document(cls, raw: dict[str, Any]) -> "ProposalSummaryResponse":
        return cls(**cls._fields_from_document(raw))


class ProposalResponse(ProposalSummaryResponse):
    """Full proposal including attachments. Used by GET /proposals/{id}."""

    document_file: AttachmentResponse | None = None
    image_file: AttachmentResponse | None = None

    @classmethod
    def from_document(cls, raw: dict[str, Any]) -> "ProposalResponse":
        return cls(
            **cls._fields_from_document(raw),
            document_file=AttachmentResponse.from_attachment(
                Attachment.from_document(raw.get(AttachmentKind.DOCUMENT.value))
            ),
            image_file=AttachmentResponse.from_attachment(
                Attachment.from_document(raw.get(AttachmentKind.IMAGE.value))
            ),
        )
