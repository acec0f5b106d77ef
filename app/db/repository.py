# =============================================================================
# Proposal Repository — All Reads and Writes Against the Collection
# =============================================================================
#
# The repository is the only code that touches the MongoDB collection.
# It speaks in plain dicts (stored field names, `_id` as ObjectId) and
# leaves validation and HTTP concerns to the service layer.
#
# DESIGN DECISION: Protocol + one concrete class, same as the vector store
# abstraction pattern. Tests supply an in-memory implementation of
# `ProposalStore` without a running MongoDB.
#
# Ids arrive as strings from the URL. A string that is not a valid
# ObjectId can never match a record, so it is treated as "not found"
# rather than raised.
#
# Timestamps are maintained here: `createdAt` and `updatedAt` on insert,
# `updatedAt` on every update.
# =============================================================================

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Protocol

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from app.db.models import CREATED_AT, LIST_PROJECTION, UPDATED_AT, AttachmentKind

logger = logging.getLogger(__name__)


def parse_object_id(value: str) -> ObjectId | None:
    """Convert a URL id to an ObjectId; None if it is not a 24-char hex id."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def _now() -> datetime:
    return datetime.now(UTC)


class ProposalStore(Protocol):
    """Collection operations the proposal service depends on."""

    async def insert(self, fields: dict[str, Any]) -> str:
        """Insert a new record. Returns the assigned id as hex string."""
        ...

    async def list_summaries(self) -> list[dict[str, Any]]:
        """All records, attachment fields excluded."""
        ...

    async def get(self, proposal_id: str) -> dict[str, Any] | None:
        """Full record, or None if absent or the id is malformed."""
        ...

    async def get_attachment(
        self, proposal_id: str, kind: AttachmentKind,
    ) -> dict[str, Any] | None:
        """Stored attachment sub-document, or None."""
        ...

    async def update(
        self,
        proposal_id: str,
        set_fields: dict[str, Any],
        unset_fields: list[str],
    ) -> bool:
        """Apply $set/$unset. False if no record matched."""
        ...

    async def delete(self, proposal_id: str) -> bool:
        """Remove the record. False if no record matched."""
        ...


class ProposalRepository:
    """MongoDB-backed `ProposalStore`."""

    def __init__(self, collection: AsyncCollection) -> None:
        self._collection = collection

    async def insert(self, fields: dict[str, Any]) -> str:
        now = _now()
        document = {**fields, CREATED_AT: now, UPDATED_AT: now}
        result = await self._collection.insert_one(document)
        return str(result.inserted_id)

    async def list_summaries(self) -> list[dict[str, Any]]:
        cursor = self._collection.find({}, LIST_PROJECTION)
        return await cursor.to_list()

    async def get(self, proposal_id: str) -> dict[str, Any] | None:
        oid = parse_object_id(proposal_id)
        if oid is None:
            return None
        return await self._collection.find_one({"_id": oid})

    async def get_attachment(
        self, proposal_id: str, kind: AttachmentKind,
    ) -> dict[str, Any] | None:
        # Only the requested slot is fetched; the other attachment may be
        # several megabytes.
        oid = parse_object_id(proposal_id)
        if oid is None:
            return None
        record = await self._collection.find_one({"_id": oid}, {kind.value: 1})
        if record is None:
            return None
        return record.get(kind.value)

    async def update(
        self,
        proposal_id: str,
        set_fields: dict[str, Any],
        unset_fields: list[str],
    ) -> bool:
        oid = parse_object_id(proposal_id)
        if oid is None:
            return False

        update: dict[str, Any] = {"$set": {**set_fields, UPDATED_AT: _now()}}
        if unset_fields:
            update["$unset"] = {field: "" for field in unset_fields}

        # Projection keeps the returned document small; only existence matters.
        result = await self._collection.find_one_and_update(
            {"_id": oid},
            update,
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
        )
        return result is not None

    async def delete(self, proposal_id: str) -> bool:
        oid = parse_object_id(proposal_id)
        if oid is None:
            return False
        result = await self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0
