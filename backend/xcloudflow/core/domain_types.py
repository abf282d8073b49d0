"""Domain Types — result shapes and closed identifier sets for StackFlow.

Invariants:
    - NormalizedDNSRecord holds exactly one of value / value_from
    - to_dict() omits optional keys that are unset (no nulls in output)
    - RpcMethod and ToolName are closed sets; dispatch matches on them exhaustively

Design Decisions:
    - Frozen dataclasses: results are request-scoped values, never mutated
      after construction (dataclasses.replace() to stamp target ids)
    - str Enums: compare equal to raw wire strings, serialize without custom encoders
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NewType


RunId = NewType("RunId", str)


# ─── Enums ───────────────────────────────────────────────────────

class RpcMethod(str, Enum):
    """JSON-RPC methods served by the MCP endpoint."""
    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"


class ToolName(str, Enum):
    """Tools exposed through tools/call."""
    VALIDATE = "stackflow.validate"
    PLAN_DNS = "stackflow.plan.dns"


class RunStatus(str, Enum):
    """Audit run outcome."""
    OK = "ok"
    FAILED = "failed"


# ─── Results ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class NormalizedDNSRecord:
    """Canonical DNS record; target is stamped by the plan compiler."""
    name: str
    type: str
    value: str | None = None
    value_from: str | None = None
    ttl: int | None = None
    proxied: bool | None = None
    target: str | None = None

    def to_dict(self) -> dict:
        out: dict = {"name": self.name, "type": self.type}
        if self.value_from is not None:
            out["valueFrom"] = self.value_from
        else:
            out["value"] = self.value
        if self.ttl is not None:
            out["ttl"] = self.ttl
        if self.proxied is not None:
            out["proxied"] = self.proxied
        if self.target is not None:
            out["target"] = self.target
        return out


@dataclass(frozen=True)
class ValidationResult:
    stack: str
    domain: str
    dns_provider: str
    cloud: str
    target_count: int
    ok: bool = True

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "stack": self.stack,
            "domain": self.domain,
            "dns_provider": self.dns_provider,
            "cloud": self.cloud,
            "targetCount": self.target_count,
        }


@dataclass(frozen=True)
class DNSPlan:
    """Ordered DNS record plan: target declaration order, then record order."""
    stack: str
    env: str
    domain: str
    dns_provider: str
    records: tuple[NormalizedDNSRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "stack": self.stack,
            "env": self.env,
            "global": {
                "domain": self.domain,
                "dns_provider": self.dns_provider,
            },
            "records": [r.to_dict() for r in self.records],
        }
