"""MCP Endpoint — JSON-RPC 2.0 over HTTP POST.

Invariants:
    - Only POST /mcp is dispatched; GET/PUT/PATCH/DELETE get 405 with an empty body
    - Response body is always a JSON-RPC envelope with HTTP 200, including RPC errors
    - The ToolDispatch instance is built once in the lifespan (app.state) and
      shared by all requests

Design Decisions:
    - Raw body handed to ToolDispatch.handle(): the dispatcher owns strict
      envelope decoding so malformed JSON maps to -32700, not FastAPI's 422
    - get_tool_dispatch as a dependency: tests override it without running the lifespan
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from xcloudflow.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)
router = APIRouter(tags=["mcp"])


def get_tool_dispatch(request: Request) -> ToolDispatch:
    """FastAPI dependency for the process-wide dispatcher."""
    dispatch = getattr(request.app.state, "tool_dispatch", None)
    if dispatch is None:
        raise RuntimeError("ToolDispatch not initialized")
    return dispatch


@router.post("/mcp")
async def mcp_call(
    request: Request, dispatch: ToolDispatch = Depends(get_tool_dispatch),
):
    """Handle one JSON-RPC request."""
    body = await request.body()
    return JSONResponse(content=await dispatch.handle(body))


@router.api_route(
    "/mcp", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False,
)
async def mcp_method_not_allowed():
    """Transport-level rejection: the RPC endpoint only accepts POST."""
    return Response(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED, headers={"Allow": "POST"},
    )
