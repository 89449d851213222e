from __future__ import annotations

import pytest

from devtools_mcp.registry import ToolRegistry
from devtools_mcp.tool_inputs import ExplainCodeInput, LintCodeInput


def test_register_rejects_empty_names() -> None:
    registry = ToolRegistry()

    with pytest.raises(ValueError):
        registry.register("", "Nothing", ExplainCodeInput, lambda params: None)
    with pytest.raises(ValueError):
        registry.register("   ", "Nothing", ExplainCodeInput, lambda params: None)
    assert len(registry) == 0


def test_register_rejects_non_callable_handler() -> None:
    with pytest.raises(TypeError):
        ToolRegistry().register("x", "Nothing", ExplainCodeInput, "not callable")


def test_reregistration_replaces_descriptor() -> None:
    registry = ToolRegistry()
    registry.register("tool", "first", ExplainCodeInput, lambda params: 1)
    replacement = registry.register("tool", "second", LintCodeInput, lambda params: 2)

    assert len(registry) == 1
    assert registry.get("tool") is replacement
    assert registry.get("tool").description == "second"
    assert set(registry.get("tool").input_schema["properties"]) == {"language", "code"}


def test_input_schema_is_read_only() -> None:
    registry = ToolRegistry()
    descriptor = registry.register("tool", "desc", ExplainCodeInput, lambda params: None)

    with pytest.raises(TypeError):
        descriptor.input_schema["properties"] = {}  # type: ignore[index]
    with pytest.raises(AttributeError):
        descriptor.name = "renamed"  # type: ignore[misc]


def test_default_registry_contents(registry: ToolRegistry) -> None:
    assert registry.names() == [
        "handle_request",
        "generate_snippet",
        "lint_code",
        "run_tests",
        "explain_code",
    ]
    assert "lint_code" in registry
    assert "missing" not in registry


def test_list_tools_returns_mcp_tool_entries(registry: ToolRegistry) -> None:
    tools = {tool["name"]: tool for tool in registry.list_tools()}

    run_tests = tools["run_tests"]
    schema = run_tests["inputSchema"]
    assert schema["type"] == "object"
    assert schema["required"] == ["code", "tests"]
    assert schema["properties"]["tests"]["items"] == {"type": "string"}
    assert run_tests["annotations"]["readOnlyHint"] is True
    assert run_tests["annotations"]["title"] == "Run Mock Tests"
