"""IterationTask — the unit of dispatch: one prompt, one iteration."""

from dataclasses import dataclass

from compass_bench.fixture.domain.fixture import Fixture
from compass_bench.fixture.domain.prompt import PromptSpec


@dataclass(frozen=True)
class IterationTask:
    """One (prompt, iteration) pair. `iteration` is 1-based.

    `prompt_index` is the prompt's position in the fixture and fixes the
    order of the final result sequence.
    """

    prompt: PromptSpec
    prompt_index: int
    iteration: int

    @property
    def prompt_id(self) -> str:
        return self.prompt.id

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.prompt_index, self.iteration)


def expand_tasks(fixture: Fixture, iterations: int) -> list[IterationTask]:
    """Return exactly one task per (prompt, iteration), in fixture order."""
    return [
        IterationTask(prompt=prompt, prompt_index=index, iteration=iteration)
        for index, prompt in enumerate(fixture.prompts)
        for iteration in range(1, iterations + 1)
    ]
