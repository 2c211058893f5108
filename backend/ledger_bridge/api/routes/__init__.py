"""Route Modules — one file per resource/concern.

Invariants:
    - Each module exports a ROUTES list of core.routing.Route
    - Handlers take a RequestContext and return an Outcome or raise LedgerBridgeError

Design Decisions:
    - Explicit registration in api/route_table.py over auto-discovery
"""
