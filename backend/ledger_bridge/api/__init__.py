"""API Layer — Dispatcher, Route Table assembly, rendering and error handlers.

Invariants:
    - Routes registered explicitly in api/route_table.py (no auto-discovery)
    - All endpoints return the {success, data, error} envelope

Design Decisions:
    - Thin handlers delegate to services (provisioning, batch processing)
"""
