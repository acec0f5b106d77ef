# =============================================================================
# Models Package — Pydantic V2 Schemas
# =============================================================================
# Defines the response schemas for the API. Requests are multipart forms,
# parsed in app/api/deps.py into a ProposalForm (app/services/proposals.py).
#
# These are SEPARATE from the stored document shape (app/db/models.py).
# =============================================================================
