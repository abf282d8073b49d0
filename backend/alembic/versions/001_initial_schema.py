"""Initial schema — xcf_runs audit table.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "xcf_runs",
        sa.Column("run_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("stack", sa.String(200), nullable=False),
        sa.Column("env", sa.String(100), nullable=False, server_default=""),
        sa.Column("phase", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("actor", sa.String(200), nullable=True),
        sa.Column("config_ref", sa.Text, nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("inputs", sa.JSON, nullable=True),
        sa.Column("result", sa.JSON, nullable=True),
    )
    op.create_index("ix_xcf_runs_stack_started", "xcf_runs", ["stack", "started_at"])


def downgrade() -> None:
    op.drop_index("ix_xcf_runs_stack_started", table_name="xcf_runs")
    op.drop_table("xcf_runs")
