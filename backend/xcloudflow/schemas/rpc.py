"""RPC Schemas — Pydantic models for JSON-RPC envelopes and tool arguments.

Invariants:
    - RpcRequest is strict: unknown top-level fields and non-string method/jsonrpc
      are rejected (caller maps the failure to -32700 "invalid JSON")
    - JSON null for a string field reads as "" (same as the field being absent)
    - params / arguments stay opaque until the method / tool is known
    - ToolCallParams and ToolArguments ignore extra keys (only the envelope is strict)

Design Decisions:
    - Pydantic over hand-written dict checks: one validation path for JSON text
      and already-decoded values (model_validate_json / model_validate)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

JSONRPC_VERSION = "2.0"


class RpcRequest(BaseModel):
    """Inbound JSON-RPC request envelope."""
    model_config = ConfigDict(extra="forbid")

    jsonrpc: StrictStr = ""
    id: Any = None
    method: StrictStr = ""
    params: Any = None

    @field_validator("jsonrpc", "method", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ToolCallParams(BaseModel):
    """params of a tools/call request; arguments decoded per tool."""
    name: StrictStr = ""
    arguments: Any = None

    @field_validator("name", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ToolArguments(BaseModel):
    """Arguments shared by both StackFlow tools."""
    config_yaml: StrictStr = ""
    env: StrictStr = ""

    @field_validator("config_yaml", "env", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


def rpc_result(request_id: Any, result: Any) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def rpc_error(request_id: Any, error: dict) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}
