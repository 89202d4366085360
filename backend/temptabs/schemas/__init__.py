"""API Schemas: Pydantic request/response models for the HTTP boundary.

Invariants:
    - Schemas convert to and from core types; they never touch the store
"""
