"""xcloudflow API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Catch-all error handler keeps unexpected failures out of response bodies
    - CORS configured from settings (not hardcoded)
    - Tool catalog and ToolDispatch built exactly once, in the lifespan
    - Database (run audit) initialized only when DATABASE_URL is set

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Catalog passed explicitly to ToolDispatch and kept on app.state, not in a
      module global (ADR: no import side effects)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xcloudflow.api.error_handlers import register_error_handlers
from xcloudflow.api.routes import health, mcp
from xcloudflow.config import Settings, get_settings
from xcloudflow.core.repository_protocols import AuditSink
from xcloudflow.infrastructure.database import close_db, init_db
from xcloudflow.infrastructure.observability import setup_logging
from xcloudflow.services.audit_log import SqlAuditLog
from xcloudflow.services.tool_dispatch import ToolDispatch
from xcloudflow.services.tools_registry import build_tool_catalog

logger = logging.getLogger(__name__)


def build_tool_dispatch(
    settings: Settings, audit: AuditSink | None = None,
) -> ToolDispatch:
    """Construct the process-wide dispatcher from settings."""
    return ToolDispatch(
        build_tool_catalog(),
        server_name=settings.server_name,
        server_version=settings.server_version,
        audit=audit,
        actor=settings.audit_actor or None,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    audit = None
    if settings.database_url:
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        audit = SqlAuditLog(manager)
    else:
        logger.info("DATABASE_URL not set; run auditing disabled")
    app.state.tool_dispatch = build_tool_dispatch(settings, audit)
    logger.info("xcloudflow API started")
    yield
    await close_db()
    logger.info("xcloudflow API shutting down")


app = FastAPI(
    title="xcloudflow API", version=get_settings().server_version, lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration (ExMA: no convention-over-config)
app.include_router(health.router)
app.include_router(mcp.router)

register_error_handlers(app)
