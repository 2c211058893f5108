"""Services Layer — provisioning policy and batch processing over the engine session.

Invariants:
    - Batch type dispatch uses an explicit dict mapping (no auto-discovery)
"""
