"""Pydantic Schemas — request validation at the API boundary.

Invariants:
    - Domain enums from core/ used for enum fields
    - Schemas are API contracts; models are persistence
"""
