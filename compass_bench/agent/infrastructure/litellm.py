"""LiteLLMAgentInvoker — benchmarks a plain chat model through LiteLLM."""

import asyncio
import time

import litellm

from compass_bench.agent.domain.execution import ExecutionStatus, RawExecution
from compass_bench.agent.domain.observer import AgentObserver
from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.fixture.domain.prompt import PromptSpec


class LiteLLMAgentInvoker:
    """AgentInvoker that sends the prompt as a single chat completion.

    There is no workspace: the transcript is the model's reply and git_diff
    is always None. Useful for scoring a bare model against the same fixture
    as a coding agent.
    """

    def __init__(self, observer: AgentObserver) -> None:
        self._observer = observer

    async def invoke(
        self, prompt: PromptSpec, agent: AgentSpec, timeout_seconds: float
    ) -> RawExecution:
        self._observer.agent_invocation_started(
            prompt_id=prompt.id, agent_type=agent.type, model=agent.model
        )

        messages = []
        if agent.system_prompt:
            messages.append({"role": "system", "content": agent.system_prompt})
        messages.append({"role": "user", "content": prompt.prompt})

        start = time.monotonic()
        try:
            async with asyncio.timeout(timeout_seconds):
                response = await litellm.acompletion(
                    model=agent.model,
                    messages=messages,
                    timeout=timeout_seconds,
                )
        except TimeoutError:
            self._observer.agent_invocation_timed_out(
                prompt_id=prompt.id, timeout_seconds=timeout_seconds
            )
            return RawExecution(
                status=ExecutionStatus.TIMEOUT,
                duration_ms=_elapsed_ms(start),
                error=f"agent did not finish within {timeout_seconds}s",
            )
        except asyncio.CancelledError:
            self._observer.agent_invocation_cancelled(prompt_id=prompt.id)
            raise
        except Exception as exc:
            reason = str(exc)
            self._observer.agent_invocation_failed(prompt_id=prompt.id, reason=reason)
            return RawExecution(
                status=ExecutionStatus.ERROR,
                duration_ms=_elapsed_ms(start),
                error=f"Failed to invoke agent: {reason}",
            )

        duration_ms = _elapsed_ms(start)
        content = response.choices[0].message.content or ""

        self._observer.agent_invocation_completed(
            prompt_id=prompt.id, duration_ms=duration_ms, exit_code=None
        )
        return RawExecution(
            status=ExecutionStatus.OK,
            transcript=content.strip(),
            duration_ms=duration_ms,
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
