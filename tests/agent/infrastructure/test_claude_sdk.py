"""Tests for ClaudeAgentSDKInvoker."""

import asyncio
from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import MagicMock, patch

from claude_agent_sdk._errors import ClaudeSDKError
from claude_agent_sdk.types import AssistantMessage, ResultMessage, TextBlock

from compass_bench.agent.domain.execution import ExecutionStatus
from compass_bench.agent.infrastructure.claude_sdk import (
    DEFAULT_MODEL,
    ClaudeAgentSDKInvoker,
)
from compass_bench.config.domain.agent import AgentParameters
from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.fixture.domain.prompt import PromptSpec
from tests.agent.fake_observer import FakeAgentObserver

_QUERY = "compass_bench.agent.infrastructure.claude_sdk.query"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_invoker(
    allow_full_access: bool = True,
) -> tuple[ClaudeAgentSDKInvoker, FakeAgentObserver]:
    observer = FakeAgentObserver()
    invoker = ClaudeAgentSDKInvoker(
        parameters=AgentParameters(
            allow_full_access=allow_full_access, env={"API_KEY": "k"}
        ),
        observer=observer,
    )
    return invoker, observer


def _make_prompt() -> PromptSpec:
    return PromptSpec.model_validate(
        {"id": "p1", "prompt": "What is 6 x 7?", "expected": "42"}
    )


def _make_agent(model: str | None = None) -> AgentSpec:
    return AgentSpec(
        type="claude_agent_sdk", model=model, system_prompt="Answer tersely."
    )


def _make_result_message(
    result: str | None = "The answer is 42.", is_error: bool = False
) -> ResultMessage:
    return ResultMessage(
        subtype="success",
        duration_ms=1500,
        duration_api_ms=1200,
        is_error=is_error,
        num_turns=1,
        session_id="test-session-id",
        total_cost_usd=0.001,
        usage=None,
        result=result,
    )


def _make_assistant_message(text: str) -> AssistantMessage:
    return AssistantMessage(content=[TextBlock(text=text)], model=DEFAULT_MODEL)


async def _async_gen(*items: Any) -> AsyncIterator[Any]:
    """Async generator yielding a fixed set of items."""
    for item in items:
        yield item


def _mock_query(*items: Any) -> MagicMock:
    """Return a MagicMock for `query` that yields the given items when iterated."""
    mock = MagicMock()
    mock.return_value = _async_gen(*items)
    return mock


def _mock_query_raising(exc: Exception) -> MagicMock:
    """Return a MagicMock for `query` that raises on iteration."""

    async def _raising_gen() -> AsyncIterator[Any]:
        raise exc
        yield  # make it an async generator

    mock = MagicMock()
    mock.return_value = _raising_gen()
    return mock


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class TestOptions:
    """The SDK session is configured from the agent spec and parameters."""

    async def test_options_carry_model_prompt_and_permissions(self) -> None:
        invoker, _ = _make_invoker()
        mock_query = _mock_query(_make_result_message())

        with patch(_QUERY, new=mock_query):
            await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent("claude-opus-4"), timeout_seconds=30
            )

        kwargs = mock_query.call_args.kwargs
        options = kwargs["options"]
        assert kwargs["prompt"] == "What is 6 x 7?"
        assert options.model == "claude-opus-4"
        assert options.system_prompt == "Answer tersely."
        assert options.permission_mode == "bypassPermissions"
        assert options.env == {"API_KEY": "k"}
        assert options.setting_sources == []

    async def test_default_permission_mode_without_full_access(self) -> None:
        invoker, _ = _make_invoker(allow_full_access=False)
        mock_query = _mock_query(_make_result_message())

        with patch(_QUERY, new=mock_query):
            await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert mock_query.call_args.kwargs["options"].permission_mode == "default"

    async def test_default_model_when_unset(self) -> None:
        invoker, observer = _make_invoker()

        with patch(_QUERY, new=_mock_query(_make_result_message())):
            await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert observer.invocation_started[0].model == DEFAULT_MODEL


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class TestTranscript:
    async def test_uses_result_text(self) -> None:
        invoker, observer = _make_invoker()

        with patch(_QUERY, new=_mock_query(_make_result_message("  42  "))):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert execution.status is ExecutionStatus.OK
        assert execution.transcript == "42"
        assert execution.exit_code is None
        assert observer.invocation_completed[0].exit_code is None

    async def test_falls_back_to_assistant_text(self) -> None:
        invoker, _ = _make_invoker()
        mock_query = _mock_query(
            _make_assistant_message("Thinking..."),
            _make_assistant_message("It is 42."),
            _make_result_message(result=None),
        )

        with patch(_QUERY, new=mock_query):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert execution.transcript == "Thinking...\nIt is 42."


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    """SDK failures become ERROR executions, never exceptions."""

    async def test_sdk_error(self) -> None:
        invoker, observer = _make_invoker()

        with patch(_QUERY, new=_mock_query_raising(ClaudeSDKError("cli crashed"))):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert execution.status is ExecutionStatus.ERROR
        assert execution.error == "Failed to invoke agent: cli crashed"
        assert observer.invocation_failed[0].reason == "cli crashed"

    async def test_generic_exception_from_reader(self) -> None:
        invoker, _ = _make_invoker()

        with patch(_QUERY, new=_mock_query_raising(Exception("reader died"))):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert execution.status is ExecutionStatus.ERROR

    async def test_missing_result_message(self) -> None:
        invoker, _ = _make_invoker()

        with patch(_QUERY, new=_mock_query(_make_assistant_message("hi"))):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert execution.status is ExecutionStatus.ERROR
        assert execution.error is not None
        assert "no ResultMessage" in execution.error

    async def test_error_result(self) -> None:
        invoker, _ = _make_invoker()

        with patch(
            _QUERY, new=_mock_query(_make_result_message("rate limited", is_error=True))
        ):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=30
            )

        assert execution.status is ExecutionStatus.ERROR
        assert execution.error is not None
        assert "rate limited" in execution.error

    async def test_timeout(self) -> None:
        invoker, observer = _make_invoker()

        async def _slow_gen() -> AsyncIterator[Any]:
            await asyncio.sleep(30)
            yield _make_result_message()

        mock = MagicMock()
        mock.return_value = _slow_gen()

        with patch(_QUERY, new=mock):
            execution = await invoker.invoke(
                prompt=_make_prompt(), agent=_make_agent(), timeout_seconds=0.1
            )

        assert execution.status is ExecutionStatus.TIMEOUT
        assert len(observer.invocation_timed_out) == 1
