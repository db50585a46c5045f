"""CliAgentInvoker — runs a coding-agent CLI as a subprocess, one per iteration."""

import asyncio
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from compass_bench.agent.domain.execution import ExecutionStatus, RawExecution
from compass_bench.agent.domain.observer import AgentObserver
from compass_bench.agent.infrastructure.errors import AgentInvocationError
from compass_bench.agent.infrastructure.process import run_process, strip_ansi
from compass_bench.agent.infrastructure.workspace import (
    collect_git_diff,
    iteration_workspace,
)
from compass_bench.config.domain.agent import AgentParameters
from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.fixture.domain.prompt import PromptSpec

# Stderr is echoed into the error detail of a failed run, truncated to this length.
_MAX_STDERR_CHARS = 2000


@dataclass(frozen=True)
class CommandContext:
    """Everything an argv builder may need for one invocation."""

    prompt: str
    model: str | None
    workdir: Path
    allow_full_access: bool
    extra_args: list[str]
    template: list[str]


type ArgvBuilder = Callable[[CommandContext], list[str]]


def _model_args(ctx: CommandContext) -> list[str]:
    return ["--model", ctx.model] if ctx.model else []


def _claude_code_argv(ctx: CommandContext) -> list[str]:
    full_access = ["--dangerously-skip-permissions"] if ctx.allow_full_access else []
    return ["claude", *full_access, *_model_args(ctx), *ctx.extra_args, "-p", ctx.prompt]


def _codex_argv(ctx: CommandContext) -> list[str]:
    sandbox = ["--sandbox", "danger-full-access"] if ctx.allow_full_access else []
    return ["codex", "exec", *_model_args(ctx), *sandbox, *ctx.extra_args, ctx.prompt]


def _gemini_argv(ctx: CommandContext) -> list[str]:
    yolo = ["--yolo"] if ctx.allow_full_access else []
    return [
        "gemini",
        ctx.prompt,
        *_model_args(ctx),
        "--output-format",
        "text",
        *yolo,
        *ctx.extra_args,
    ]


def _copilot_argv(ctx: CommandContext) -> list[str]:
    allow_all = (
        ["--allow-all-tools", "--allow-all-paths"] if ctx.allow_full_access else []
    )
    return [
        "copilot",
        "--silent",
        "--no-color",
        *_model_args(ctx),
        *allow_all,
        "--add-dir",
        str(ctx.workdir),
        *ctx.extra_args,
        "-p",
        ctx.prompt,
    ]


def _opencode_argv(ctx: CommandContext) -> list[str]:
    return ["opencode", "run", *_model_args(ctx), *ctx.extra_args, ctx.prompt]


def _template_argv(ctx: CommandContext) -> list[str]:
    """Expand the `{prompt}` / `{model}` / `{workdir}` placeholders of a custom command."""
    values = {
        "{prompt}": ctx.prompt,
        "{model}": ctx.model or "",
        "{workdir}": str(ctx.workdir),
    }
    argv: list[str] = []
    for item in ctx.template:
        for placeholder, value in values.items():
            item = item.replace(placeholder, value)
        argv.append(item)
    return [*argv, *ctx.extra_args]


ARGV_BUILDERS: dict[str, ArgvBuilder] = {
    "claude_code": _claude_code_argv,
    "codex": _codex_argv,
    "gemini": _gemini_argv,
    "copilot": _copilot_argv,
    "opencode": _opencode_argv,
    "command": _template_argv,
}

DEFAULT_MODELS: dict[str, str] = {
    "claude_code": "claude-sonnet-4-5",
    "codex": "gpt-5-codex",
    "gemini": "gemini-2.5-pro",
    "copilot": "claude-sonnet-4.5",
    "opencode": "anthropic/claude-sonnet-4-5",
}


class CliAgentInvoker:
    """AgentInvoker that shells out to an agent CLI inside a fresh workspace.

    Each invoke() gets its own temporary directory (a copy of the configured
    repository, or an empty directory), so iterations running concurrently
    never share files. The git diff of that copy is attached to the result.
    """

    def __init__(self, parameters: AgentParameters, observer: AgentObserver) -> None:
        self._parameters = parameters
        self._observer = observer

    async def invoke(
        self, prompt: PromptSpec, agent: AgentSpec, timeout_seconds: float
    ) -> RawExecution:
        builder = ARGV_BUILDERS.get(agent.type)
        if builder is None:
            reason = f"no command line known for agent type '{agent.type}'"
            self._observer.agent_invocation_failed(prompt_id=prompt.id, reason=reason)
            return RawExecution(status=ExecutionStatus.ERROR, error=reason)

        model = agent.model or DEFAULT_MODELS.get(agent.type)
        self._observer.agent_invocation_started(
            prompt_id=prompt.id, agent_type=agent.type, model=model
        )
        started = time.monotonic()

        try:
            async with asyncio.timeout(timeout_seconds):
                async with iteration_workspace(self._parameters.repo_path) as workdir:
                    ctx = CommandContext(
                        prompt=prompt.prompt,
                        model=model,
                        workdir=workdir,
                        allow_full_access=self._parameters.allow_full_access,
                        extra_args=list(agent.args),
                        template=list(agent.command),
                    )
                    output = await run_process(
                        builder(ctx), cwd=workdir, env=self._build_env()
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
        transcript = strip_ansi(output.stdout).strip()
        stderr = strip_ansi(output.stderr).strip()

        if output.exit_code != 0:
            reason = f"agent exited with code {output.exit_code}"
            if stderr:
                reason = f"{reason}: {stderr[-_MAX_STDERR_CHARS:]}"
            self._observer.agent_invocation_failed(prompt_id=prompt.id, reason=reason)
            return RawExecution(
                status=ExecutionStatus.ERROR,
                transcript=transcript,
                git_diff=git_diff,
                exit_code=output.exit_code,
                duration_ms=duration_ms,
                error=reason,
            )

        self._observer.agent_invocation_completed(
            prompt_id=prompt.id, duration_ms=duration_ms, exit_code=output.exit_code
        )
        return RawExecution(
            status=ExecutionStatus.OK,
            transcript=transcript,
            git_diff=git_diff,
            exit_code=output.exit_code,
            duration_ms=duration_ms,
        )

    def _build_env(self) -> dict[str, str]:
        return {**os.environ, **self._parameters.env}


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
