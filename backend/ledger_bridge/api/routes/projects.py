"""Projects — list, lookup, creation, cost codes and search."""

from ledger_bridge.api.context import RequestContext, expect
from ledger_bridge.core.decoding import require_text
from ledger_bridge.core.defaults import LEDGER_LIMIT, LIST_LIMIT
from ledger_bridge.core.envelope import Outcome, created, ok
from ledger_bridge.core.errors import DownstreamError, ResourceNotFoundError
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import CreateProjectRequest


async def list_projects(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        "get_projects", ctx.query_text("search"), ctx.query_limit(LIST_LIMIT),
    )
    return ok(expect(result, "Failed to list projects"))


async def get_project(ctx: RequestContext) -> Outcome:
    project_ref = ctx.params["projectRef"]
    project = expect(
        await ctx.engine.call("get_project", project_ref), "Failed to get project",
    )
    if project is None:
        raise ResourceNotFoundError("Project", project_ref)
    return ok(project)


async def create_project(ctx: RequestContext) -> Outcome:
    body = ctx.require(CreateProjectRequest)
    require_text(body.project_ref, "projectRef")
    project = expect(
        await ctx.engine.call("create_project", body), "Failed to create project",
    )
    if project is None:
        raise DownstreamError("Failed to create project")
    return created(project)


async def project_cost_codes(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        "get_project_cost_codes", ctx.query_text("project"), ctx.query_limit(LEDGER_LIMIT),
    )
    return ok(expect(result, "Failed to get project cost codes"))


async def search_projects(ctx: RequestContext) -> Outcome:
    search = ctx.query.get("q") or ctx.query_text("search")
    result = await ctx.engine.call(
        "search_projects", search, ctx.query_text("status"), ctx.query_limit(LIST_LIMIT),
    )
    return ok(expect(result, "Failed to search projects"))


ROUTES = [
    Route("GET", "/api/projects", list_projects, "List projects"),
    Route("POST", "/api/projects", create_project, "Create project"),
    Route("GET", "/api/projects/{projectRef}", get_project, "Get project"),
    Route("GET", "/api/projectcostcodes", project_cost_codes, "List project cost codes"),
    Route("GET", "/api/search/projects", search_projects, "Search projects"),
]
