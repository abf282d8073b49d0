"""SQL Audit Log — AuditSink implementation backed by the xcf_runs table.

Invariants:
    - One committed Run row per record_run() call
    - run_id generated client-side so it is known before commit
    - DB failures surface as DatabaseError (via DatabaseSessionManager);
      ToolDispatch is responsible for ignoring them

Design Decisions:
    - started_at == finished_at: tool calls are synchronous, so the run is
      written once, already finished, instead of insert-then-update
"""

import logging
import uuid
from datetime import datetime, timezone

from xcloudflow.core.domain_types import RunId
from xcloudflow.core.repository_protocols import RunEntry
from xcloudflow.infrastructure.database import DatabaseSessionManager
from xcloudflow.models.run import Run

logger = logging.getLogger(__name__)


class SqlAuditLog:
    """Persists RunEntry records through a DatabaseSessionManager."""

    def __init__(self, sessions: DatabaseSessionManager):
        self._sessions = sessions

    async def record_run(self, entry: RunEntry) -> RunId:
        run_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        async with self._sessions.session() as db:
            db.add(Run(
                run_id=run_id,
                stack=entry.stack,
                env=entry.env,
                phase=entry.phase,
                status=entry.status,
                actor=entry.actor,
                config_ref=entry.config_ref,
                started_at=now,
                finished_at=now,
                inputs=entry.inputs,
                result=entry.result,
            ))
            await db.commit()
        logger.debug(
            f"Run {run_id} recorded ({entry.status})",
            extra={"run_id": str(run_id), "stack": entry.stack},
        )
        return RunId(str(run_id))
