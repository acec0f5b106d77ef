# =============================================================================
# Services Package — Business Logic
# =============================================================================
# Separated from the API handlers so it can be tested without HTTP:
#   - proposals.py: form validation, record shaping, CRUD over ProposalStore
#   - errors.py: ProposalError hierarchy (each error carries its HTTP status)
# =============================================================================
