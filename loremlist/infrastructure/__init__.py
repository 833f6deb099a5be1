"""Infrastructure Layer - SQL adapters for the core ports and cross-cutting concerns.

Invariants:
    - Implements core/ protocols; core/ never imports from here
    - All storage calls wrapped with error mapping (storage_errors.py)
"""
