"""Subprocess helper — spawns a command, captures output, always reaps the child."""

import asyncio
import os
import re
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from compass_bench.agent.infrastructure.errors import AgentInvocationError

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07]*\x07")
_POSIX = os.name == "posix"


@dataclass(frozen=True)
class ProcessOutput:
    stdout: str
    stderr: str
    exit_code: int


def strip_ansi(text: str) -> str:
    """Remove terminal colour and OSC escape sequences."""
    return _ANSI_ESCAPE.sub("", text)


async def run_process(
    argv: Sequence[str],
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout_seconds: float | None = None,
) -> ProcessOutput:
    """Run argv to completion and return its decoded output.

    The child runs in its own session so that the whole process group can be
    killed. If the call times out or the awaiting task is cancelled, the group
    is killed and the child reaped before the exception propagates.

    Raises:
        AgentInvocationError: if the executable cannot be started.
        TimeoutError: if timeout_seconds elapses first.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=_POSIX,
        )
    except OSError as exc:
        raise AgentInvocationError(reason=f"could not start '{argv[0]}': {exc}") from exc

    try:
        async with asyncio.timeout(timeout_seconds):
            stdout, stderr = await process.communicate()
    finally:
        if process.returncode is None:
            await _kill_and_reap(process)

    return ProcessOutput(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=process.returncode if process.returncode is not None else -1,
    )


async def _kill_and_reap(process: asyncio.subprocess.Process) -> None:
    try:
        if _POSIX:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass
    await process.wait()
