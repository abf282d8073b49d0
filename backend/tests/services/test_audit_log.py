"""SQL Audit Log — persistence of RunEntry records into xcf_runs.

Tests cover:
    - record_run inserts one row and returns its run_id
    - All RunEntry fields persisted (JSON inputs/result included)
    - ToolDispatch wired to SqlAuditLog writes one row per known tool call
"""

import json
import uuid

from sqlalchemy import select

from xcloudflow.core.repository_protocols import RunEntry
from xcloudflow.models.run import Run
from xcloudflow.services.audit_log import SqlAuditLog
from xcloudflow.services.tool_dispatch import ToolDispatch
from xcloudflow.services.tools_registry import build_tool_catalog

from tests.stackflow_samples import WEB_STACK_YAML


async def _all_runs(session_factory) -> list[Run]:
    async with session_factory() as db:
        result = await db.execute(select(Run))
        return list(result.scalars())


def _tools_call(tool: str) -> bytes:
    return json.dumps({
        "jsonrpc": "2.0", "id": 1, "method": "tools/call",
        "params": {"name": tool, "arguments": {"config_yaml": WEB_STACK_YAML}},
    }).encode()


async def test_record_run_persists_entry(session_manager, test_session_factory):
    audit = SqlAuditLog(session_manager)
    run_id = await audit.record_run(RunEntry(
        stack="web", env="prod", phase="mcp.tools/call:stackflow.validate",
        status="ok", actor="ci", config_ref="stacks/web.yaml",
        inputs={"tool": "stackflow.validate"}, result={"ok": True},
    ))

    [run] = await _all_runs(test_session_factory)
    assert str(run.run_id) == run_id
    assert uuid.UUID(run_id)
    assert run.stack == "web"
    assert run.env == "prod"
    assert run.status == "ok"
    assert run.actor == "ci"
    assert run.config_ref == "stacks/web.yaml"
    assert run.inputs == {"tool": "stackflow.validate"}
    assert run.result == {"ok": True}
    assert run.finished_at is not None


async def test_dispatch_writes_one_run_per_call(
    session_manager, test_session_factory,
):
    dispatch = ToolDispatch(build_tool_catalog(), audit=SqlAuditLog(session_manager))
    await dispatch.handle(_tools_call("stackflow.validate"))
    await dispatch.handle(_tools_call("stackflow.plan.dns"))
    await dispatch.handle(b'{"jsonrpc":"2.0","id":2,"method":"tools/list"}')

    runs = await _all_runs(test_session_factory)
    assert sorted(r.phase for r in runs) == [
        "mcp.tools/call:stackflow.plan.dns",
        "mcp.tools/call:stackflow.validate",
    ]
    assert all(r.status == "ok" and r.stack == "web" for r in runs)
