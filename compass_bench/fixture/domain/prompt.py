"""PromptSpec domain value object — one prompt and its expected criteria."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from compass_bench.fixture.domain.criteria import Criteria


class PromptSpec(BaseModel, frozen=True):
    """Immutable value object representing a single benchmark prompt.

    A raw prompt may carry the shorthand `expected: "<text>"` instead of a
    `criteria` block; it is expanded into a single-item substring criteria.
    """

    id: str = Field(min_length=1)
    prompt: str = Field(min_length=1)
    criteria: Criteria

    @model_validator(mode="before")
    @classmethod
    def _expand_expected_shorthand(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "criteria" in data:
            return data
        expected = data.get("expected")
        if not isinstance(expected, str):
            return data
        expanded = {key: value for key, value in data.items() if key != "expected"}
        expanded["criteria"] = {"kind": "substring", "expected": [expected]}
        return expanded
