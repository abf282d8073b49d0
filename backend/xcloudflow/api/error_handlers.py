"""Error Handlers — last-resort exception handler for the xcloudflow API.

Invariants:
    - Any exception escaping a route becomes a 500 with a fixed JSON body
    - Internal details (exception text, traceback) only reach the log
    - /mcp never relies on this: ToolDispatch.handle() turns every failure
      into a JSON-RPC error object before the route returns

Design Decisions:
    - Extracted from main.py (ADR: ExMA import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from xcloudflow.core.errors import ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {
    "error": {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "category": ErrorCategory.INTERNAL.value,
        "severity": ErrorSeverity.CRITICAL.value,
    },
}


def register_error_handlers(app: FastAPI) -> None:
    """Register the catch-all handler on the FastAPI app."""

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True, extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
        )
