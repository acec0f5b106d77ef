# =============================================================================
# Shared Test Fixtures
# =============================================================================
#
# InMemoryProposalStore implements the ProposalStore protocol over a dict,
# so the HTTP tests run the real service and handlers without MongoDB.
# Ids are real ObjectIds and malformed ids behave exactly as in the Mongo
# repository (they never match).
# =============================================================================

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.api.deps import get_proposal_repository
from app.db.models import ATTACHMENT_FIELDS, CREATED_AT, UPDATED_AT, AttachmentKind
from app.db.repository import parse_object_id
from app.main import app


class InMemoryProposalStore:
    """Dict-backed stand-in for ProposalRepository."""

    def __init__(self) -> None:
        self.records: dict[ObjectId, dict[str, Any]] = {}

    async def insert(self, fields: dict[str, Any]) -> str:
        oid = ObjectId()
        now = datetime.now(UTC)
        self.records[oid] = {"_id": oid, **fields, CREATED_AT: now, UPDATED_AT: now}
        return str(oid)

    async def list_summaries(self) -> list[dict[str, Any]]:
        return [
            {k: v for k, v in copy.deepcopy(r).items() if k not in ATTACHMENT_FIELDS}
            for r in self.records.values()
        ]

    async def get(self, proposal_id: str) -> dict[str, Any] | None:
        record = self.records.get(parse_object_id(proposal_id))
        return copy.deepcopy(record) if record else None

    async def get_attachment(
        self, proposal_id: str, kind: AttachmentKind,
    ) -> dict[str, Any] | None:
        record = self.records.get(parse_object_id(proposal_id))
        return copy.deepcopy(record.get(kind.value)) if record else None

    async def update(
        self,
        proposal_id: str,
        set_fields: dict[str, Any],
        unset_fields: list[str],
    ) -> bool:
        record = self.records.get(parse_object_id(proposal_id))
        if record is None:
            return False
        record.update(set_fields)
        for field in unset_fields:
            record.pop(field, None)
        record[UPDATED_AT] = datetime.now(UTC)
        return True

    async def delete(self, proposal_id: str) -> bool:
        return self.records.pop(parse_object_id(proposal_id), None) is not None


@pytest.fixture
def store() -> InMemoryProposalStore:
    """Fresh, empty store per test."""
    return InMemoryProposalStore()


@pytest.fixture
def client(store: InMemoryProposalStore):
    """
    TestClient over the real app with the store swapped out.

    Not entered as a context manager, so the lifespan (and its MongoDB
    client) never runs.
    """
    app.dependency_overrides[get_proposal_repository] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
