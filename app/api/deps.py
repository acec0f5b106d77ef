# =============================================================================
# API Dependencies — Store, Service and Request Body Parsing
# =============================================================================
#
# Provides the FastAPI dependencies the proposal routes are built from:
#
# 1. get_proposal_repository() — repository over the app's MongoDB client
# 2. get_proposal_service()    — ProposalService wired to settings
# 3. parse_proposal_form()     — JSON or multipart body → ProposalForm
#
# DESIGN DECISION: The Mongo client lives on `app.state` (opened by the
# lifespan in app/main.py), and the repository is resolved per request
# from it. Tests replace the whole store with
#   app.dependency_overrides[get_proposal_repository] = lambda: fake_store
#
# DESIGN DECISION: The multipart body is parsed by hand rather than with
# `Form(...)` / `File(...)` parameters, because
#   - file parts under unknown field names must be rejected with 400,
#     which declared parameters cannot see
#   - missing required fields must be a 400 from the service layer,
#     not FastAPI's automatic 422
#
# Bodies without files may also be sent as a JSON object with the same
# text fields. Anything that is not `application/json` goes through the
# form parser.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import Depends, Request
from starlette.datastructures import UploadFile

from app.config import Settings, get_settings
from app.db.engine import get_proposal_collection
from app.db.models import ATTACHMENT_FIELDS, TEXT_FIELDS, Attachment, AttachmentKind
from app.db.repository import ProposalRepository, ProposalStore
from app.services.errors import ProposalValidationError
from app.services.proposals import ProposalForm, ProposalService

logger = logging.getLogger(__name__)

UNEXPECTED_FIELD = "Unexpected field"
INVALID_JSON_BODY = "Request body must be a JSON object"


def get_proposal_repository(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> ProposalStore:
    client = request.app.state.mongo_client
    return ProposalRepository(get_proposal_collection(client, settings))


def get_proposal_service(
    store: ProposalStore = Depends(get_proposal_repository),
    settings: Settings = Depends(get_settings),
) -> ProposalService:
    return ProposalService(store, max_upload_bytes=settings.max_upload_bytes)


async def _read_upload(upload: UploadFile, max_bytes: int) -> Attachment:
    """
    Read an uploaded part into memory.

    At most `max_bytes + 1` bytes are read: enough for the service to see
    that the file is over the cap without buffering the rest of it.
    """
    data = await upload.read(max_bytes + 1)
    return Attachment(
        filename=upload.filename,
        content_type=upload.content_type,
        data=data,
    )


def _form_from_json(body: object) -> ProposalForm:
    """
    Build a ProposalForm from a JSON body. JSON bodies carry no files.

    Raises:
        ProposalValidationError: the body is not an object, or a text field
            holds something other than a string.
    """
    if not isinstance(body, dict):
        raise ProposalValidationError(INVALID_JSON_BODY)
    text = {}
    for field in TEXT_FIELDS:
        value = body.get(field)
        if value is not None and not isinstance(value, str):
            raise ProposalValidationError(f"Field `{field}` must be a string")
        text[field] = value
    return ProposalForm(**text)


async def parse_proposal_form(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> ProposalForm:
    """
    Parse a create/update body, either JSON or multipart.

    Raises:
        ProposalValidationError: a malformed JSON body, a file part under a
            field other than documentFile/imageFile, or more than one part
            for either.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";", 1)[0].strip().lower() == "application/json":
        try:
            body = await request.json()
        except ValueError:
            raise ProposalValidationError(INVALID_JSON_BODY) from None
        return _form_from_json(body)

    form = await request.form()
    try:
        uploads: dict[str, Attachment] = {}
        for key, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            if key not in ATTACHMENT_FIELDS or key in uploads:
                logger.info("Rejected upload part %r", key)
                raise ProposalValidationError(UNEXPECTED_FIELD)
            uploads[key] = await _read_upload(value, settings.max_upload_bytes)

        text = {}
        for field in TEXT_FIELDS:
            value = form.get(field)
            text[field] = value if isinstance(value, str) else None
    finally:
        await form.close()

    return ProposalForm(
        **text,
        document_file=uploads.get(AttachmentKind.DOCUMENT.value),
        image_file=uploads.get(AttachmentKind.IMAGE.value),
    )
