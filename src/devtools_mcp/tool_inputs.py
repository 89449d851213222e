from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ToolInputBase(BaseModel):
    """Shared configuration for structured tool inputs.

    Inputs are validated strictly: no type coercion and no unknown keys, so a
    number sent where a string is declared is a schema mismatch rather than a
    silently converted value.
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
    )


class HandleRequestInput(ToolInputBase):
    payload: str = Field(
        ...,
        description="Raw JSON text carrying at least an `intent` field.",
    )


class GenerateSnippetInput(ToolInputBase):
    language: str = Field(
        ...,
        description="Target language: `python`, `javascript` or `typescript`.",
    )
    description: str = Field(
        ...,
        description="What the generated function should do.",
    )


class LintCodeInput(ToolInputBase):
    language: str = Field(..., description="Language the code is written in.")
    code: str = Field(..., description="Source text to lint.")


class RunTestsInput(ToolInputBase):
    code: str = Field(..., description="Source text under test.")
    tests: List[str] = Field(
        ...,
        description="Human-readable test case names to execute against `code`.",
    )


class ExplainCodeInput(ToolInputBase):
    code: str = Field(..., description="Source text to explain.")


__all__ = [
    "ExplainCodeInput",
    "GenerateSnippetInput",
    "HandleRequestInput",
    "LintCodeInput",
    "RunTestsInput",
    "ToolInputBase",
]
