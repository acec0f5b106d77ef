# =============================================================================
# Proposal Service
# =============================================================================
# A CRUD HTTP service for proposal records, each with an optional document
# and image attachment stored inline in MongoDB.
#
# Package structure:
#   app/
#   ├── api/          → FastAPI routes, dependencies, request logging
#   ├── db/           → MongoDB client lifecycle, document shape, repository
#   ├── models/       → Pydantic V2 response schemas
#   ├── services/     → Validation, record shaping, error types
#   ├── config.py     → pydantic-settings configuration
#   └── main.py       → FastAPI app, lifespan, exception handlers
# =============================================================================
