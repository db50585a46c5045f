"""ClaudeAgentSDKInvoker — agent invoker using the Claude Agent SDK in-process."""

import asyncio
import contextlib
import time

from claude_agent_sdk import query
from claude_agent_sdk._errors import ClaudeSDKError
from claude_agent_sdk.types import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    TextBlock,
)

from compass_bench.agent.domain.execution import ExecutionStatus, RawExecution
from compass_bench.agent.domain.observer import AgentObserver
from compass_bench.agent.infrastructure.errors import AgentInvocationError
from compass_bench.agent.infrastructure.workspace import (
    collect_git_diff,
    iteration_workspace,
)
from compass_bench.config.domain.agent import AgentParameters
from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.fixture.domain.prompt import PromptSpec

DEFAULT_MODEL = "claude-sonnet-4-5"


class ClaudeAgentSDKInvoker:
    """AgentInvoker that drives Claude through the Agent SDK.

    Each invoke() opens a new SDK session rooted in a fresh iteration
    workspace, so the agent's edits show up in the collected git diff.
    """

    def __init__(self, parameters: AgentParameters, observer: AgentObserver) -> None:
        self._parameters = parameters
        self._observer = observer

    async def invoke(
        self, prompt: PromptSpec, agent: AgentSpec, timeout_seconds: float
    ) -> RawExecution:
        model = agent.model or DEFAULT_MODEL
        self._observer.agent_invocation_started(
            prompt_id=prompt.id, agent_type=agent.type, model=model
        )
        started = time.monotonic()

        try:
            async with asyncio.timeout(timeout_seconds):
                async with iteration_workspace(self._parameters.repo_path) as workdir:
                    options = ClaudeAgentOptions(
                        model=model,
                        system_prompt=agent.system_prompt,
                        permission_mode=self._permission_mode(),
                        cwd=workdir,
                        env=dict(self._parameters.env),
                        setting_sources=[],
                    )
                    transcript = await self._collect_transcript(
                        prompt=prompt.prompt, options=options
                    )
                    git_diff = await collect_git_diff(workdir)
        except TimeoutError:
            self._observer.agent_invocation_timed_out(
                prompt_id=prompt.id, timeout_seconds=timeout_seconds
            )
            return RawExecution(
                status=ExecutionStatus.TIMEOUT,
                duration_ms=_elapsed_ms(started),
                error=f"agent did not finish within {timeout_seconds}s",
            )
        except AgentInvocationError as exc:
            self._observer.agent_invocation_failed(
                prompt_id=prompt.id, reason=exc.reason
            )
            return RawExecution(
                status=ExecutionStatus.ERROR,
                duration_ms=_elapsed_ms(started),
                error=str(exc),
            )
        except asyncio.CancelledError:
            self._observer.agent_invocation_cancelled(prompt_id=prompt.id)
            raise

        duration_ms = _elapsed_ms(started)
        self._observer.agent_invocation_completed(
            prompt_id=prompt.id, duration_ms=duration_ms, exit_code=None
        )
        return RawExecution(
            status=ExecutionStatus.OK,
            transcript=transcript,
            git_diff=git_diff,
            duration_ms=duration_ms,
        )

    async def _collect_transcript(
        self, prompt: str, options: ClaudeAgentOptions
    ) -> str:
        """Run the SDK query and return the agent's final answer.

        Prefers ResultMessage.result; falls back to the concatenated text
        blocks of the assistant messages when the result carries no text.

        Raises:
            AgentInvocationError: on SDK errors or a missing/error ResultMessage.
        """
        result_message: ResultMessage | None = None
        text_parts: list[str] = []

        try:
            async with contextlib.aclosing(
                query(prompt=prompt, options=options)
            ) as messages:
                async for message in messages:
                    if isinstance(message, ResultMessage):
                        result_message = message
                    elif isinstance(message, AssistantMessage):
                        for block in message.content:
                            if isinstance(block, TextBlock):
                                text_parts.append(block.text)
        except ClaudeSDKError as exc:
            raise AgentInvocationError(reason=str(exc)) from exc
        except Exception as exc:
            # The SDK raises a bare Exception when its message reader hits a
            # fatal error (e.g. the bundled CLI exits).
            raise AgentInvocationError(reason=str(exc)) from exc

        if result_message is None:
            raise AgentInvocationError(reason="no ResultMessage in response stream")

        if result_message.is_error:
            raise AgentInvocationError(
                reason=f"agent returned error response: {result_message.result}"
            )

        if result_message.result:
            return result_message.result.strip()
        return "\n".join(text_parts).strip()

    def _permission_mode(self) -> str:
        return "bypassPermissions" if self._parameters.allow_full_access else "default"


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
