"""Tools Registry tests — verify the fixed two-tool catalog.

Tests cover:
    - Catalog contains exactly stackflow.validate and stackflow.plan.dns
    - Each inputSchema requires config_yaml and accepts env
    - to_list() returns copies: mutating output never changes the catalog
"""

from xcloudflow.core.domain_types import ToolName
from xcloudflow.services.tools_registry import build_tool_catalog


def test_catalog_has_two_tools():
    catalog = build_tool_catalog()
    assert [t["name"] for t in catalog.to_list()] == [
        "stackflow.validate", "stackflow.plan.dns",
    ]


def test_catalog_entries_map_to_tool_names():
    catalog = build_tool_catalog()
    assert {t.name for t in catalog.tools} == set(ToolName)


def test_input_schema_contract():
    for tool in build_tool_catalog().to_list():
        schema = tool["inputSchema"]
        assert set(tool) == {"name", "description", "inputSchema"}
        assert schema["required"] == ["config_yaml"]
        assert schema["properties"]["config_yaml"]["type"] == "string"
        assert schema["properties"]["env"]["type"] == "string"


def test_to_list_returns_independent_copies():
    catalog = build_tool_catalog()
    first = catalog.to_list()
    first[0]["inputSchema"]["required"].append("hacked")
    first[0]["name"] = "renamed"
    second = catalog.to_list()
    assert second[0]["name"] == "stackflow.validate"
    assert second[0]["inputSchema"]["required"] == ["config_yaml"]
