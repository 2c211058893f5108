"""Pydantic Schemas — request bodies and engine records.

Invariants:
    - Schemas validate at system boundary (request bodies, engine output)
    - Wire names are camelCase aliases of snake_case attributes
"""
