"""Per-iteration working directories and git diff collection."""

import asyncio
import shutil
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from compass_bench.agent.infrastructure.errors import AgentInvocationError
from compass_bench.agent.infrastructure.process import run_process

_GIT_TIMEOUT_SECONDS = 60.0


@asynccontextmanager
async def iteration_workspace(repo_path: Path | None) -> AsyncIterator[Path]:
    """Yield a fresh temporary directory, seeded with a copy of repo_path if given.

    When the copy is a git work tree it is reset to its committed state first.
    The directory is removed on every exit path, including cancellation.
    """
    root = Path(tempfile.mkdtemp(prefix="compass-iteration-"))
    workdir = root / "repo"
    try:
        if repo_path is None:
            workdir.mkdir()
        else:
            await _copy_repository(source=repo_path, destination=workdir)
            if is_git_work_tree(workdir):
                await _git(workdir, "reset", "--hard")
                await _git(workdir, "clean", "-fd")
        yield workdir
    finally:
        await asyncio.to_thread(shutil.rmtree, root, ignore_errors=True)


def is_git_work_tree(path: Path) -> bool:
    return (path / ".git").exists()


async def collect_git_diff(workdir: Path) -> str | None:
    """Return the working-tree diff including new files, or None outside git."""
    if not is_git_work_tree(workdir):
        return None
    await _git(workdir, "add", "--all", "--intent-to-add")
    output = await _git(workdir, "--no-pager", "diff")
    return output.strip()


async def _copy_repository(source: Path, destination: Path) -> None:
    try:
        await asyncio.to_thread(shutil.copytree, source, destination, symlinks=True)
    except OSError as exc:
        raise AgentInvocationError(
            reason=f"could not copy repository {source}: {exc}"
        ) from exc


async def _git(workdir: Path, *args: str) -> str:
    try:
        output = await run_process(
            ["git", *args], cwd=workdir, timeout_seconds=_GIT_TIMEOUT_SECONDS
        )
    except TimeoutError as exc:
        raise AgentInvocationError(reason=f"git {args[0]} timed out") from exc
    if output.exit_code != 0:
        raise AgentInvocationError(
            reason=f"git {' '.join(args)} exited with code {output.exit_code}:"
            f" {output.stderr.strip()}"
        )
    return output.stdout
