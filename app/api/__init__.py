# =============================================================================
# API Package — FastAPI Route Handlers
# =============================================================================
#   - proposals.py: CRUD and attachment download endpoints
#   - deps.py: store/service injection and multipart form parsing
#   - request_log.py: request logging middleware
# =============================================================================
