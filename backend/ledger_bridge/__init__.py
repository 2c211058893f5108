"""Ledger Bridge — JSON/HTTP orchestration layer over an accounting engine.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
