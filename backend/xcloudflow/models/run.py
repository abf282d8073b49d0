"""Run ORM — audit table for StackFlow tool invocations.

Invariants:
    - One row per tools/call that reached a known tool (success or failure)
    - inputs/result are JSON documents; result holds {"error": ...} on failure

Design Decisions:
    - Audit table, not enforcement: observability only, no business logic depends on it
    - JSON columns for inputs/result: validate and plan.dns return different shapes
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from xcloudflow.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Run(Base):
    """Run log entry — one audited StackFlow tool invocation."""
    __tablename__ = "xcf_runs"
    __table_args__ = (Index("ix_xcf_runs_stack_started", "stack", "started_at"),)

    run_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    stack: Mapped[str] = mapped_column(String(200), nullable=False)
    env: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phase: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    actor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    config_ref: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    inputs: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    result: Mapped[dict | None] = mapped_column(JSON, nullable=True)
