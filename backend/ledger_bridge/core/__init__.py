"""Core Layer — routing, decoding, defaults, envelopes and errors. No IO.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Only references.py holds state (the per-process issued-reference record)
"""
