"""Tools Registry — immutable tool catalog served by tools/list.

Invariants:
    - Catalog built once at startup (build_tool_catalog) and passed explicitly
      to ToolDispatch; never held in module-level mutable state
    - to_list() returns fresh deep copies: callers cannot mutate the catalog
    - Every catalog entry maps to a ToolName member

Design Decisions:
    - Frozen dataclasses + tuple: safe for unsynchronized concurrent reads
    - Explicit import of TOOLS_STACKFLOW: no auto-discovery (ADR: ExMA)
"""

import copy
from dataclasses import dataclass
from typing import Any

from xcloudflow.core.domain_types import ToolName
from xcloudflow.services.define_stackflow_tools import TOOLS_STACKFLOW


@dataclass(frozen=True)
class ToolDescriptor:
    name: ToolName
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict:
        return {
            "name": self.name.value,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


@dataclass(frozen=True)
class ToolCatalog:
    tools: tuple[ToolDescriptor, ...]

    def to_list(self) -> list[dict]:
        return [t.to_dict() for t in self.tools]


def build_tool_catalog() -> ToolCatalog:
    """Build the static catalog from the tool definitions."""
    return ToolCatalog(tuple(
        ToolDescriptor(
            name=ToolName(definition["name"]),
            description=definition["description"],
            input_schema=copy.deepcopy(definition["inputSchema"]),
        )
        for definition in TOOLS_STACKFLOW
    ))
