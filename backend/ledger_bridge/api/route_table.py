"""Route Table assembly — every endpoint module's ROUTES, registered explicitly.

Invariants:
    - Modules are listed explicitly (no auto-discovery)
    - Built once at import time; RouteTable orders routes by specificity
"""

from ledger_bridge.api.routes import (
    accounts, bank_journals, ledger_postings, ledger_queries, nominals,
    orders, products, projects, reference_data, transactions,
)
from ledger_bridge.core.routing import RouteTable

ROUTE_TABLE = RouteTable([
    *reference_data.ROUTES,
    *accounts.ROUTES,
    *ledger_postings.ROUTES,
    *nominals.ROUTES,
    *bank_journals.ROUTES,
    *products.ROUTES,
    *orders.ROUTES,
    *ledger_queries.ROUTES,
    *transactions.ROUTES,
    *projects.ROUTES,
])
