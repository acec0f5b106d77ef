"""
Proposal service errors.

Each error carries the HTTP status it maps to; the exception handlers in
app/main.py render them as `{"error": message}`.
"""


class ProposalError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProposalValidationError(ProposalError):
    """Bad or missing field, rejected file type, oversized or unexpected upload."""

    status_code = 400


class ProposalNotFoundError(ProposalError):
    """Record (or one of its attachments) does not exist, or the id is malformed."""

    status_code = 404
