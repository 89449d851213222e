from __future__ import annotations

import orjson
import pytest

from devtools_mcp.registry import Dispatcher
from devtools_mcp.tools.lint import MISSING_FUNCTION
from devtools_mcp.tools.source import count_lines, function_names, has_function_declaration


async def _structured(dispatcher: Dispatcher, tool: str, arguments):
    result = await dispatcher.dispatch("session", tool, arguments)
    return result["structuredContent"]


@pytest.mark.asyncio
async def test_handle_request_returns_parsed_payload(dispatcher: Dispatcher) -> None:
    structured = await _structured(dispatcher, "handle_request", {"payload": '{"intent":"build"}'})

    assert structured["success"] is True
    assert structured["content"]["parsed"] == {"intent": "build"}
    assert structured["content"]["next_tool"] == "generate_snippet"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,error",
    [
        ("", "Empty payload"),
        ("   ", "Invalid JSON payload"),
        ("{bad json", "Invalid JSON payload"),
        ("1 === 1 ? (global.pwned = true) : 0", "Invalid JSON payload"),
        ('{"other": 1}', "Missing 'intent' field in payload"),
        ('{"intent": ""}', "Missing 'intent' field in payload"),
        ('{"intent": null}', "Missing 'intent' field in payload"),
        ('{"intent": false}', "Missing 'intent' field in payload"),
        ('{"intent": 0}', "Missing 'intent' field in payload"),
        ('["intent"]', "Missing 'intent' field in payload"),
    ],
)
async def test_handle_request_errors(dispatcher: Dispatcher, payload: str, error: str) -> None:
    structured = await _structured(dispatcher, "handle_request", {"payload": payload})

    assert structured["success"] is False
    assert structured["error"] == error


@pytest.mark.asyncio
async def test_handle_request_unknown_intent_has_no_next_tool(dispatcher: Dispatcher) -> None:
    structured = await _structured(
        dispatcher, "handle_request", {"payload": '{"intent": "deploy", "target": "prod"}'}
    )

    assert structured["content"] == {
        "parsed": {"intent": "deploy", "target": "prod"},
        "next_tool": None,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("intent", [[], {}, 1])
async def test_handle_request_accepts_non_empty_intent_values(dispatcher: Dispatcher, intent) -> None:
    payload = orjson.dumps({"intent": intent}).decode()
    structured = await _structured(dispatcher, "handle_request", {"payload": payload})

    assert structured["success"] is True
    assert structured["content"] == {"parsed": {"intent": intent}, "next_tool": None}


@pytest.mark.asyncio
async def test_handle_request_ignores_byte_order_mark(dispatcher: Dispatcher) -> None:
    structured = await _structured(
        dispatcher, "handle_request", {"payload": "\ufeff{\"intent\":\"build\"}"}
    )

    assert structured["content"]["next_tool"] == "generate_snippet"


@pytest.mark.asyncio
async def test_run_tests_all_fail_without_function(dispatcher: Dispatcher) -> None:
    structured = await _structured(
        dispatcher,
        "run_tests",
        {"code": "console.log('hi')", "tests": ["a should pass", "b should fail"]},
    )

    content = structured["content"]
    assert content["passed"] == 0
    assert content["failed"] == 2
    assert [case["status"] for case in content["results"]] == ["failed", "failed"]


@pytest.mark.asyncio
async def test_run_tests_pass_with_function(dispatcher: Dispatcher) -> None:
    structured = await _structured(
        dispatcher,
        "run_tests",
        {"code": "function add(a, b) { return a + b; }", "tests": ["adds", "adds again"]},
    )

    assert structured["content"]["passed"] == 2
    assert structured["content"]["failed"] == 0


@pytest.mark.asyncio
async def test_run_tests_with_no_cases(dispatcher: Dispatcher) -> None:
    structured = await _structured(dispatcher, "run_tests", {"code": "def f(): pass", "tests": []})

    assert structured["content"] == {"passed": 0, "failed": 0, "results": []}


@pytest.mark.asyncio
async def test_lint_code_reports_missing_function(dispatcher: Dispatcher) -> None:
    missing = await _structured(
        dispatcher, "lint_code", {"language": "javascript", "code": "const x = 1;"}
    )
    present = await _structured(
        dispatcher,
        "lint_code",
        {"language": "javascript", "code": "function greet() { return 'hi'; }"},
    )

    assert missing["content"]["issues"] == [MISSING_FUNCTION]
    assert MISSING_FUNCTION == "Missing function declaration"
    assert present["content"]["issues"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "language,expected_start",
    [
        ("python", "def parse_a_config_file():"),
        ("PY", "def parse_a_config_file():"),
        ("javascript", "function parseAConfigFile() {"),
        ("typescript", "export function parseAConfigFile(): void {"),
    ],
)
async def test_generate_snippet_templates(
    dispatcher: Dispatcher, language: str, expected_start: str
) -> None:
    structured = await _structured(
        dispatcher,
        "generate_snippet",
        {"language": language, "description": "Parse a config   file"},
    )

    snippet = structured["content"]["snippet"]
    assert snippet.startswith(expected_start)
    assert "Parse a config file" in snippet
    assert has_function_declaration(snippet)


@pytest.mark.asyncio
async def test_generate_snippet_unsupported_language(dispatcher: Dispatcher) -> None:
    structured = await _structured(
        dispatcher, "generate_snippet", {"language": "cobol", "description": "anything"}
    )

    assert structured == {
        "success": False,
        "error": "Unsupported language: cobol",
        "code": "tool_failed",
    }


@pytest.mark.asyncio
async def test_generate_snippet_handles_numeric_description(dispatcher: Dispatcher) -> None:
    structured = await _structured(
        dispatcher, "generate_snippet", {"language": "python", "description": "2fa check"}
    )

    assert structured["content"]["snippet"].startswith("def generated_2fa_check():")


@pytest.mark.asyncio
async def test_explain_code_lists_functions(dispatcher: Dispatcher) -> None:
    code = "def load():\n    pass\n\nconst run = (x) => x\n"
    structured = await _structured(dispatcher, "explain_code", {"code": code})

    content = structured["content"]
    assert content["lines"] == 3
    assert content["functions"] == ["load", "run"]
    assert "`load`" in content["summary"]


def test_source_helpers() -> None:
    assert has_function_declaration("async def fetch(url):")
    assert has_function_declaration("items.map(x => x * 2)")
    assert has_function_declaration("func main() {}")
    assert has_function_declaration("fn main() {}")
    assert not has_function_declaration("print('function')")
    assert function_names("function a() {}\nfunction b() {}\nfunction a() {}") == ["a", "b"]
    assert count_lines("\n\nx\n  \ny") == 2
