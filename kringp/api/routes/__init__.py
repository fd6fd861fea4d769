"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with a /api/v1 prefix and tags
    - Rules live in core/ and services/; routes validate, orchestrate and commit
"""
