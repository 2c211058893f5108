"""Infrastructure Layer — engine session, sandbox engine, logging setup.

Invariants:
    - All engine calls wrapped with serialization, timeout and error mapping
"""
