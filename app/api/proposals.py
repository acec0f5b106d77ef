# =============================================================================
# Proposals API — CRUD Over Proposal Records and Their Attachments
# =============================================================================
#
# ENDPOINTS:
#   POST   /proposals               — create (JSON or multipart), 201 + {message, id}
#   GET    /proposals               — list, attachments excluded
#   GET    /proposals/{id}          — full record, attachments as base64
#   GET    /proposals/{id}/document — raw document bytes
#   GET    /proposals/{id}/image    — raw image bytes
#   PUT    /proposals/{id}          — update (JSON or multipart), overwrite semantics
#   DELETE /proposals/{id}          — delete
#
# Handlers stay thin: the service validates and raises ProposalError
# subclasses, and the exception handlers in app/main.py turn those (and
# store failures) into `{"error": message}` with the right status.
# =============================================================================

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.deps import get_proposal_service, parse_proposal_form
from app.db.models import DOCUMENT_CONTENT_TYPES, AttachmentKind
from app.models.responses import (
    ErrorResponse,
    MessageResponse,
    ProposalCreatedResponse,
    ProposalResponse,
    ProposalSummaryResponse,
)
from app.services.proposals import ProposalForm, ProposalService

router = APIRouter(prefix="/proposals", tags=["Proposals"])

# The body is parsed by parse_proposal_form, so FastAPI cannot infer its
# schema; describe it for /docs by hand.
_TEXT_PROPERTIES = {
    "name": {"type": "string"},
    "yeshiva": {"type": "string"},
    "shadchan": {"type": "string"},
    "details": {"type": "string"},
    "notes": {"type": "string"},
}
_REQUIRED_TEXT = ["name", "yeshiva", "shadchan", "details"]

_PROPOSAL_BODY = {
    "requestBody": {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        **_TEXT_PROPERTIES,
                        "documentFile": {
                            "type": "string",
                            "format": "binary",
                            "description": "One of: " + ", ".join(sorted(DOCUMENT_CONTENT_TYPES)),
                        },
                        "imageFile": {
                            "type": "string",
                            "format": "binary",
                            "description": "Any image/* content type",
                        },
                    },
                    "required": _REQUIRED_TEXT,
                },
            },
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": _TEXT_PROPERTIES,
                    "required": _REQUIRED_TEXT,
                },
            },
        },
        "required": True,
    },
}

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=ProposalCreatedResponse,
    status_code=201,
    summary="Create a proposal",
    responses=_ERRORS,
    openapi_extra=_PROPOSAL_BODY,
)
async def create_proposal(
    form: ProposalForm = Depends(parse_proposal_form),
    service: ProposalService = Depends(get_proposal_service),
) -> ProposalCreatedResponse:
    proposal_id = await service.create(form)
    return ProposalCreatedResponse(id=proposal_id)


@router.get(
    "",
    response_model=list[ProposalSummaryResponse],
    summary="List proposals without attachment data",
    responses=_ERRORS,
)
async def list_proposals(
    service: ProposalService = Depends(get_proposal_service),
) -> list[ProposalSummaryResponse]:
    records = await service.list_all()
    return [ProposalSummaryResponse.from_document(r) for r in records]


@router.get(
    "/{proposal_id}",
    response_model=ProposalResponse,
    summary="Get a proposal with its attachments",
    responses=_ERRORS,
)
async def get_proposal(
    proposal_id: str,
    service: ProposalService = Depends(get_proposal_service),
) -> ProposalResponse:
    return ProposalResponse.from_document(await service.get(proposal_id))


async def _attachment_response(
    service: ProposalService,
    proposal_id: str,
    kind: AttachmentKind,
) -> Response:
    attachment = await service.get_attachment(proposal_id, kind)
    return Response(content=attachment.data, media_type=attachment.content_type)


@router.get(
    "/{proposal_id}/document",
    response_class=Response,
    summary="Download the proposal's document",
    responses=_ERRORS,
)
async def get_proposal_document(
    proposal_id: str,
    service: ProposalService = Depends(get_proposal_service),
) -> Response:
    return await _attachment_response(service, proposal_id, AttachmentKind.DOCUMENT)


@router.get(
    "/{proposal_id}/image",
    response_class=Response,
    summary="Download the proposal's image",
    responses=_ERRORS,
)
async def get_proposal_image(
    proposal_id: str,
    service: ProposalService = Depends(get_proposal_service),
) -> Response:
    return await _attachment_response(service, proposal_id, AttachmentKind.IMAGE)


@router.put(
    "/{proposal_id}",
    response_model=MessageResponse,
    summary="Update a proposal",
    description=(
        "Writes every text field: fields left out of the body are cleared. "
        "Attachments are replaced only when a new file is uploaded."
    ),
    responses=_ERRORS,
    openapi_extra=_PROPOSAL_BODY,
)
async def update_proposal(
    proposal_id: str,
    form: ProposalForm = Depends(parse_proposal_form),
    service: ProposalService = Depends(get_proposal_service),
) -> MessageResponse:
    await service.update(proposal_id, form)
    return MessageResponse(message="Proposal updated successfully")


@router.delete(
    "/{proposal_id}",
    response_model=MessageResponse,
    summary="Delete a proposal",
    responses=_ERRORS,
)
async def delete_proposal(
    proposal_id: str,
    service: ProposalService = Depends(get_proposal_service),
) -> MessageResponse:
    await service.delete(proposal_id)
    return MessageResponse(message="Proposal deleted successfully")
