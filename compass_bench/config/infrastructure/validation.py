"""Semantic validation of a RunConfig — run before any task is dispatched."""

from compass_bench.config.domain.config import RunConfig
from compass_bench.config.infrastructure.errors import ConfigValidationError


def collect_config_problems(config: RunConfig) -> list[str]:
    """Return every semantic problem found in config, in a stable order."""
    problems: list[str] = []

    if config.iterations < 1:
        problems.append(f"iterations must be at least 1 (got {config.iterations})")
    if config.concurrency < 1:
        problems.append(f"concurrency must be at least 1 (got {config.concurrency})")
    if config.timeout_seconds <= 0:
        problems.append(
            f"timeout_seconds must be greater than 0 (got {config.timeout_seconds})"
        )
    if config.cancel_grace_seconds < 0:
        problems.append(
            "cancel_grace_seconds must not be negative"
            f" (got {config.cancel_grace_seconds})"
        )

    success = config.scoring.success_threshold
    partial = config.scoring.partial_threshold
    if not 0.0 < success <= 1.0:
        problems.append(f"success_threshold must be in (0, 1] (got {success})")
    if not 0.0 <= partial < success:
        problems.append(
            f"partial_threshold must be in [0, success_threshold) (got {partial})"
        )

    if not config.fixture.is_file():
        problems.append(f"fixture not found: {config.fixture}")

    repo_path = config.agent.repo_path
    if repo_path is not None and not repo_path.is_dir():
        problems.append(f"repo_path is not a directory: {repo_path}")

    return problems


def validate_run_config(config: RunConfig) -> None:
    """Raise ConfigValidationError listing ALL problems found in config.

    Raises:
        ConfigValidationError: if any semantic check fails.
    """
    problems = collect_config_problems(config=config)
    if problems:
        raise ConfigValidationError(reason="; ".join(problems))
