"""Define StackFlow Tools — MCP tool schemas for validate and DNS plan.

Invariants:
    - Both tools require config_yaml (string) and accept an optional env (string)
    - Names match ToolName exactly; tools_registry refuses mismatches

Design Decisions:
    - Tool schemas in a dedicated file: explicit, no auto-discovery (ADR: ExMA anti-pattern)
    - Same input contract for both tools: env means "overlay leniently" for
      validate and "must exist" for plan.dns; the difference lives in the
      handlers, not in the schema
"""

from xcloudflow.core.domain_types import ToolName

_STACKFLOW_INPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "config_yaml": {
            "type": "string",
            "description": "StackFlow document as YAML text",
        },
        "env": {
            "type": "string",
            "description": "Optional environment name under global.environments",
        },
    },
    "required": ["config_yaml"],
}

TOOLS_STACKFLOW = [
    {
        "name": ToolName.VALIDATE.value,
        "description": "Validate StackFlow config (schema + constraints).",
        "inputSchema": _STACKFLOW_INPUT_SCHEMA,
    },
    {
        "name": ToolName.PLAN_DNS.value,
        "description": "Generate DNS plan from StackFlow config.",
        "inputSchema": _STACKFLOW_INPUT_SCHEMA,
    },
]
