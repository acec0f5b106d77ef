# =============================================================================
# FastAPI Application — Proposal Service
# =============================================================================
#
# Wires the app together:
#   - lifespan: opens the MongoDB client on startup, closes it on shutdown
#   - middleware: CORS, request logging
#   - exception handlers: every failure becomes `{"error": message}`
#   - routers: /proposals, plus GET /health
#
# RUN:
#   uvicorn app.main:app --port 3000
#   proposal-service            (console script, reads HOST/PORT)
#
# ERROR MAPPING:
#   ProposalValidationError, RequestValidationError → 400
#   ProposalNotFoundError                           → 404
#   PyMongoError, anything else                     → 500
# Messages are passed through as-is so clients see the underlying cause.
# =============================================================================

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.proposals import router as proposals_router
from app.api.request_log import RequestLoggingMiddleware
from app.config import settings
from app.db.engine import close_mongo_client, create_mongo_client, ping_mongo
from app.models.responses import HealthResponse
from app.services.errors import ProposalError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the MongoDB client for the life of the process.

    An unreachable store does not stop startup: it is logged, and each
    request that needs the store fails with a 500 until it is reachable.
    """
    client = create_mongo_client(settings)
    app.state.mongo_client = client
    if await ping_mongo(client):
        logger.info("Connected to MongoDB")

    yield

    logger.info("Shutting down")
    await close_mongo_client(client)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="CRUD service for proposal records with document and image attachments.",
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ---------------------------------------------------------------------------
# Exception Handlers
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(ProposalError)
async def proposal_error_handler(request: Request, exc: ProposalError) -> JSONResponse:
    logger.info(
        "%s %s rejected (%d): %s",
        request.method, request.url.path, exc.status_code, exc.message,
    )
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    messages = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return _error(400, messages)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return _error(500, str(exc))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, str(exc))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health() -> HealthResponse:
    return HealthResponse(version=settings.app_version, service=settings.app_name)


app.include_router(proposals_router)


def run() -> None:
    """Console-script entry point: serve on settings.host/settings.port."""
    logger.info("Server is running on port %d", settings.port)
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
