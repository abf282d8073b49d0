"""Tool Dispatch — JSON-RPC routing for the MCP endpoint.

Invariants:
    - Stateless across requests: the only shared data is the read-only ToolCatalog
    - handle() never raises: every failure becomes a JSON-RPC error object
    - Every response is {"jsonrpc": "2.0", "id": <echoed or null>, result | error}
    - Envelope decode failure -> id null, -32700 "invalid JSON"
    - Unknown method -> -32601; bad tools/call params -> -32602;
      unknown tool, pipeline errors and unexpected faults -> -32000
    - Every call that reaches a known tool is offered to the AuditSink (if any);
      audit failures are logged and never change the RPC result

Design Decisions:
    - match over closed RpcMethod / ToolName enums with explicit fallback:
      adding a method or tool means editing one visible switch (ADR: ExMA no
      convention-over-config)
    - Pipeline work is synchronous and pure; only the audit write is awaited
    - Audit write wrapped in try/except: never crashes request handling
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from xcloudflow.core.dns_plan import compile_plan
from xcloudflow.core.document import MappingNode, scalar_value
from xcloudflow.core.domain_types import RpcMethod, RunStatus, ToolName
from xcloudflow.core.env_overlay import apply_overlay
from xcloudflow.core.errors import (
    RPC_INVALID_PARAMS,
    RPC_METHOD_NOT_FOUND,
    RPC_PARSE_ERROR,
    ErrorContext,
    ProtocolError,
    XCloudFlowError,
)
from xcloudflow.core.load_config import parse
from xcloudflow.core.repository_protocols import AuditSink, RunEntry
from xcloudflow.core.validate_stack import validate
from xcloudflow.schemas.rpc import (
    JSONRPC_VERSION,
    RpcRequest,
    ToolArguments,
    ToolCallParams,
    rpc_error,
    rpc_result,
)
from xcloudflow.services.tools_registry import ToolCatalog

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_method(method: str) -> RpcMethod | None:
    try:
        return RpcMethod(method)
    except ValueError:
        return None


def _as_tool(name: str) -> ToolName | None:
    try:
        return ToolName(name)
    except ValueError:
        return None


def stack_name(doc: MappingNode | None) -> str:
    """Best-effort metadata.name for audit entries; "" when unavailable."""
    if doc is None:
        return ""
    metadata = doc.get("metadata")
    if not isinstance(metadata, MappingNode):
        return ""
    name = scalar_value(metadata.get("name"))
    return name if isinstance(name, str) else ""


class ToolDispatch:
    """Routes JSON-RPC requests to protocol handlers and StackFlow tools."""

    def __init__(
        self,
        catalog: ToolCatalog,
        *,
        server_name: str = "xcloudflow",
        server_version: str = "0.1",
        audit: AuditSink | None = None,
        actor: str | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._catalog = catalog
        self._server_name = server_name
        self._server_version = server_version
        self._audit = audit
        self._actor = actor or None
        self._clock = clock

    async def handle(self, body: bytes | str) -> dict:
        """Decode one request body and return the response envelope."""
        try:
            request = RpcRequest.model_validate_json(body)
        except PydanticValidationError:
            logger.info("Rejected malformed JSON-RPC envelope")
            return rpc_error(
                None, ProtocolError("invalid JSON", RPC_PARSE_ERROR).to_rpc_error(),
            )
        if not request.jsonrpc:
            request = request.model_copy(update={"jsonrpc": JSONRPC_VERSION})

        try:
            result = await self._dispatch(request)
        except XCloudFlowError as e:
            logger.info(
                f"RPC {request.method} failed: {e.message}",
                extra={
                    "rpc_method": request.method,
                    "error_code": e.code,
                    "tool_name": e.context.tool_name,
                    "stack": e.context.stack,
                },
            )
            return rpc_error(request.id, e.to_rpc_error())
        except Exception as e:
            logger.error(
                f"Unhandled exception in RPC {request.method}: {e}",
                exc_info=True, extra={"rpc_method": request.method},
            )
            return rpc_error(request.id, ProtocolError("internal error").to_rpc_error())
        return rpc_result(request.id, result)

    async def _dispatch(self, request: RpcRequest) -> Any:
        logger.debug(f"RPC {request.method}", extra={"rpc_method": request.method})
        match _as_method(request.method):
            case RpcMethod.INITIALIZE:
                return self._initialize()
            case RpcMethod.TOOLS_LIST:
                return {"tools": self._catalog.to_list()}
            case RpcMethod.TOOLS_CALL:
                return await self._tools_call(request.params)
            case _:
                raise ProtocolError(
                    "method not found", RPC_METHOD_NOT_FOUND,
                    ErrorContext(rpc_method=request.method),
                )

    def _initialize(self) -> dict:
        return {
            "server": {
                "name": self._server_name,
                "version": self._server_version,
            },
            "capabilities": {"tools": True},
            "time": self._clock().strftime("%Y-%m-%dT%H:%M:%SZ"),
        }

    async def _tools_call(self, params: Any) -> dict:
        try:
            call = ToolCallParams.model_validate(params)
        except PydanticValidationError:
            raise ProtocolError("invalid params", RPC_INVALID_PARAMS)
        if not call.name:
            raise ProtocolError("invalid params", RPC_INVALID_PARAMS)

        tool = _as_tool(call.name)
        if tool is None:
            raise ProtocolError(
                f"unknown tool: {call.name}", context=ErrorContext(tool_name=call.name),
            )
        args = self._decode_arguments(call.arguments, tool)

        doc = None
        try:
            doc = parse(args.config_yaml)
            result = self._run_tool(tool, doc, args.env)
        except XCloudFlowError as e:
            e.context.tool_name = tool.value
            e.context.stack = stack_name(doc) or None
            await self._record_run(
                tool, args, doc, RunStatus.FAILED, {"error": e.message},
            )
            raise
        await self._record_run(tool, args, doc, RunStatus.OK, result)
        return result

    def _decode_arguments(self, arguments: Any, tool: ToolName) -> ToolArguments:
        try:
            args = ToolArguments.model_validate(arguments)
        except PydanticValidationError:
            args = None
        if args is None or not args.config_yaml:
            raise ProtocolError(
                "missing config_yaml", context=ErrorContext(tool_name=tool.value),
            )
        return args

    def _run_tool(self, tool: ToolName, doc: MappingNode, env: str) -> dict:
        match tool:
            case ToolName.VALIDATE:
                if env:
                    doc = apply_overlay(doc, env)
                return validate(doc).to_dict()
            case ToolName.PLAN_DNS:
                return compile_plan(doc, env).to_dict()
            case _:
                raise ProtocolError(f"unknown tool: {tool.value}")

    async def _record_run(
        self, tool: ToolName, args: ToolArguments, doc: MappingNode | None,
        status: RunStatus, result: dict,
    ) -> None:
        """Offer the run to the audit sink. Failures are logged, never raised."""
        if self._audit is None:
            return
        entry = RunEntry(
            stack=stack_name(doc),
            env=args.env.strip(),
            phase=f"mcp.tools/call:{tool.value}",
            status=status.value,
            actor=self._actor,
            inputs={"tool": tool.value, "env": args.env},
            result=result,
        )
        try:
            run_id = await self._audit.record_run(entry)
            logger.debug(
                f"Recorded run for '{tool.value}'",
                extra={"run_id": run_id, "tool_name": tool.value, "stack": entry.stack},
            )
        except Exception as e:
            logger.warning(f"Failed to record run for '{tool.value}': {e}")
