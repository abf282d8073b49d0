"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Audit persistence accessed only through the AuditSink Protocol
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass any object with
      a matching record_run (ADR: ExMA anti-pattern)
    - Async in Protocol: the sink does IO; the pure pipeline never calls it,
      only the dispatcher does, after the pure work has finished
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from xcloudflow.core.domain_types import RunId


@dataclass(frozen=True)
class RunEntry:
    """One audited tool invocation."""
    stack: str
    env: str
    phase: str
    status: str
    actor: str | None = None
    config_ref: str | None = None
    inputs: dict[str, Any] = field(default_factory=dict)
    result: dict[str, Any] = field(default_factory=dict)


class AuditSink(Protocol):
    """Contract for run audit persistence — implemented by shell."""
    async def record_run(self, entry: RunEntry) -> RunId: ...
