"""Pydantic Schemas — request/response contracts for API endpoints.

Invariants:
    - Schemas check types and lengths at the system boundary
    - Domain rules (blank fields, wallet syntax, positive amounts) live in core/
      so every caller gets the same typed errors

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Response schemas built with from_model() classmethods
"""
