INSTRUCTIONS = """## Workflow
- You are connected to the `devtools_mcp` server over SSE; every tool call is answered on the open stream.
- Start with `handle_request` when you hold a raw JSON request; its `next_tool` field names the tool to call next.
- Use `generate_snippet` for a starting point, then `lint_code` and `run_tests` to check it, and `explain_code` to summarize it.

## Tool Cheatsheet
- `handle_request`: Decode a JSON payload (must contain `intent`) and suggest a follow-up tool.
- `generate_snippet`: Produce a starter function for `python`, `javascript` or `typescript`.
- `lint_code`: List structural issues; an empty `issues` list means the snippet passed.
- `run_tests`: Report `passed`/`failed` counts for named test cases.
- `explain_code`: Summarize size and declared functions of a snippet.

## Results
- Every tool answers with `structuredContent.success`; on failure read `structuredContent.error` and `structuredContent.code`.
- `schema_mismatch` errors list offending fields under `structuredContent.details.issues`.
"""
