"""Pydantic Schemas - request validation for create and patch operations.

Invariants:
    - Schemas validate at the system boundary (caller input)
    - Field limits come from core/domain_types.py

Design Decisions:
    - Separate from models: schemas are input contracts, models are persistence
"""
