# =============================================================================
# Database Package
# =============================================================================
# MongoDB client lifecycle, the stored document shape, and the repository
# that owns every read and write against the proposals collection.
#
# Key exports:
#   - create_mongo_client / close_mongo_client: lifespan helpers (engine.py)
#   - Attachment, ProposalFields: stored document shape (models.py)
#   - ProposalRepository: collection access (repository.py)
# =============================================================================
