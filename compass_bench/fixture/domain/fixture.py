"""Fixture aggregate — the ordered prompt set and agent spec for one run."""

from pydantic import BaseModel, Field, model_validator

from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.fixture.domain.prompt import PromptSpec


class Fixture(BaseModel, frozen=True):
    """Immutable fixture loaded once per run. Prompt order is significant."""

    agent: AgentSpec
    prompts: list[PromptSpec] = Field(min_length=1)

    @model_validator(mode="after")
    def _prompt_ids_are_unique(self) -> "Fixture":
        seen: set[str] = set()
        duplicates: list[str] = []
        for prompt in self.prompts:
            if prompt.id in seen and prompt.id not in duplicates:
                duplicates.append(prompt.id)
            seen.add(prompt.id)
        if duplicates:
            raise ValueError(f"duplicate prompt ids: {', '.join(duplicates)}")
        return self

    @property
    def prompt_ids(self) -> list[str]:
        return [prompt.id for prompt in self.prompts]
