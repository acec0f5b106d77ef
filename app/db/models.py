# =============================================================================
# Stored Document Shape — Proposal Records in MongoDB
# =============================================================================
#
# MongoDB has no schema, so the shape of a proposal document is defined
# here and enforced by the service layer before anything is written.
#
# DOCUMENT LAYOUT (collection "proposals"):
#
# ┌──────────────────────────────────────────────────────────┐
# │ _id           ObjectId   assigned on insert              │
# │ name          string     required                        │
# │ yeshiva       string     required                        │
# │ shadchan      string     required                        │
# │ details       string     required                        │
# │ notes         string     optional, "" when absent        │
# │ documentFile  { filename, contentType, data: Binary }    │
# │ imageFile     { filename, contentType, data: Binary }    │
# │ createdAt     datetime   set on insert                   │
# │ updatedAt     datetime   set on insert and every update  │
# └──────────────────────────────────────────────────────────┘
#
# Field names on disk are camelCase so records stay readable by other
# clients of the same collection.
# =============================================================================

import enum
from dataclasses import dataclass
from typing import Any

from bson import Binary

# ---------------------------------------------------------------------------
# Field names
# ---------------------------------------------------------------------------

REQUIRED_TEXT_FIELDS = ("name", "yeshiva", "shadchan", "details")
TEXT_FIELDS = REQUIRED_TEXT_FIELDS + ("notes",)

NOTES_DEFAULT = ""

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"

DOCUMENT_CONTENT_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})


class AttachmentKind(str, enum.Enum):
    """
    The two attachment slots a proposal has.

    The enum value is the stored field name, which is also the multipart
    field name clients upload under.
    """

    DOCUMENT = "documentFile"
    IMAGE = "imageFile"

    @property
    def label(self) -> str:
        """Human-readable name used in not-found messages."""
        return "Document" if self is AttachmentKind.DOCUMENT else "Image"

    def accepts(self, content_type: str) -> bool:
        if self is AttachmentKind.DOCUMENT:
            return content_type in DOCUMENT_CONTENT_TYPES
        return content_type.startswith("image/")


ATTACHMENT_FIELDS = tuple(kind.value for kind in AttachmentKind)

# Projection for listings: everything except attachment bytes.
LIST_PROJECTION = {field: 0 for field in ATTACHMENT_FIELDS}


# ---------------------------------------------------------------------------
# Attachment
# ---------------------------------------------------------------------------


@dataclass
class Attachment:
    """An uploaded file stored inline with its proposal."""

    filename: str | None
    content_type: str | None
    data: bytes

    def to_document(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "contentType": self.content_type,
            "data": Binary(self.data),
        }

    @classmethod
    def from_document(cls, raw: dict[str, Any] | None) -> "Attachment | None":
        """Rebuild from a stored sub-document; None if the slot is empty."""
        if not raw or raw.get("data") is None:
            return None
        return cls(
            filename=raw.get("filename"),
            content_type=raw.get("contentType"),
            data=bytes(raw["data"]),
        )

    def __repr__(self) -> str:
        return (
            f"<Attachment(filename='{self.filename}', "
            f"content_type='{self.content_type}', size={len(self.data)})>"
        )
