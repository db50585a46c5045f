"""CLI entrypoint for compass — typer app with a `run` command."""

import asyncio
import contextlib
import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any

import structlog
import typer

from compass_bench.agent.infrastructure.observer import StructlogAgentObserver
from compass_bench.agent.infrastructure.registry import RegistryAgentInvokerFactory
from compass_bench.config.domain.config import RunConfig
from compass_bench.config.infrastructure.observer import StructlogConfigObserver
from compass_bench.config.infrastructure.yaml_loader import YamlConfigLoader
from compass_bench.core.errors import CompassError
from compass_bench.evaluation.application.runner import BenchmarkRunner
from compass_bench.evaluation.domain.cancellation import CancellationToken
from compass_bench.evaluation.domain.context import RunContext
from compass_bench.evaluation.domain.observer import RunObserver
from compass_bench.evaluation.domain.result import RunnerResult
from compass_bench.evaluation.infrastructure.composite_observer import (
    CompositeRunObserver,
)
from compass_bench.evaluation.infrastructure.observer import StructlogRunObserver
from compass_bench.evaluation.infrastructure.progress_observer import (
    ProgressRunObserver,
)
from compass_bench.fixture.infrastructure.file_loader import FileFixtureLoader
from compass_bench.fixture.infrastructure.observer import StructlogFixtureObserver

app = typer.Typer(add_completion=False)


@app.callback()
def main() -> None:
    """Benchmark coding agents against a fixture of prompts."""


_OUTPUT_MODES = ("aggregated", "detailed")
# Conventional exit status for a run stopped by SIGINT.
_EXIT_CANCELLED = 130


def _configure_structlog(log_format: str, log_level: str) -> None:
    """Configure structlog based on the requested format and level.

    Logs go to stderr; stdout is reserved for the JSON result.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(
            f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.",
            err=True,
        )
        raise typer.Exit(code=1)

    level = logging.getLevelNamesMapping().get(log_level.upper())
    if level is None:
        typer.echo(f"Invalid log level: {log_level!r}.", err=True)
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _apply_overrides(
    config: RunConfig, iterations: int | None, concurrency: int | None
) -> RunConfig:
    update: dict[str, Any] = {}
    if iterations is not None:
        update["iterations"] = iterations
    if concurrency is not None:
        update["concurrency"] = concurrency
    return config.model_copy(update=update) if update else config


def _render_payload(result: RunnerResult, output_mode: str) -> str:
    payload = result.to_payload()
    if output_mode == "aggregated":
        payload = {"aggregatedResults": payload["aggregatedResults"]}
    return json.dumps(payload, indent=2)


async def _run_with_sigint(
    runner: BenchmarkRunner, config: RunConfig, context: RunContext
) -> RunnerResult:
    """Run the benchmark, turning SIGINT into a cooperative cancellation."""
    loop = asyncio.get_running_loop()
    installed = False
    # add_signal_handler is unavailable on Windows event loops.
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, context.cancellation.cancel)
        installed = True
    try:
        return await runner.run(config=config, context=context)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"


def _points_color(points: float) -> str:
    if points >= 1.0:
        return _GREEN
    if points > 0.0:
        return _YELLOW
    return _RED


def _print_summary(result: RunnerResult, elapsed_seconds: float) -> None:
    """Print a per-prompt summary table to stderr."""
    if not result.aggregated_results:
        typer.echo(f"{_DIM}No iterations completed.{_RESET}", err=True)
        return

    id_w = max(len("Prompt"), *(len(a.prompt_id) for a in result.aggregated_results))
    typer.echo("", err=True)
    typer.echo(f"  {_DIM}{'Prompt':<{id_w}}  {'Runs':>4}  {'Avg':>5}{_RESET}", err=True)
    typer.echo(f"  {'─' * id_w}  {'─' * 4}  {'─' * 5}", err=True)
    for aggregated in result.aggregated_results:
        color = _points_color(points=aggregated.average_points)
        typer.echo(
            f"  {aggregated.prompt_id:<{id_w}}  {aggregated.iterations:>4}"
            f"  {color}{aggregated.average_points:>5.2f}{_RESET}",
            err=True,
        )
    status = f"{_YELLOW}cancelled{_RESET}" if result.cancelled else "completed"
    typer.echo(
        f"\n  {_BOLD}Run {result.run_id[:8]}{_RESET} {status} in {elapsed_seconds:.1f}s",
        err=True,
    )


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to run config YAML"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON result to this file instead of stdout",
    ),
    output_mode: str = typer.Option(
        "detailed",
        "--output-mode",
        help="Result shape: 'detailed' (iterations and aggregates) or 'aggregated'",
    ),
    iterations: int | None = typer.Option(
        None, "--iterations", "-n", help="Override the config's iteration count"
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-c", help="Override the config's concurrency limit"
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
    log_level: str = typer.Option("info", "--log-level", help="Minimum log level"),
    progress: bool = typer.Option(
        True, "--progress/--no-progress", help="Render a progress bar on stderr"
    ),
) -> None:
    """Run a compass benchmark from a YAML config file."""
    if output_mode not in _OUTPUT_MODES:
        typer.echo(
            f"Invalid output mode: {output_mode!r}. Must be 'aggregated' or 'detailed'.",
            err=True,
        )
        raise typer.Exit(code=1)

    try:
        _configure_structlog(log_format=log_format, log_level=log_level)

        loader = YamlConfigLoader(observer=StructlogConfigObserver())
        config = _apply_overrides(
            config=loader.load(path=config_path),
            iterations=iterations,
            concurrency=concurrency,
        )

        observers: list[RunObserver] = [StructlogRunObserver()]
        if progress and log_format != "json":
            observers.append(ProgressRunObserver())

        runner = BenchmarkRunner(
            fixture_loader=FileFixtureLoader(observer=StructlogFixtureObserver()),
            invoker_factory=RegistryAgentInvokerFactory(
                observer=StructlogAgentObserver()
            ),
        )
        context = RunContext(
            observer=CompositeRunObserver(observers=observers),
            cancellation=CancellationToken(),
        )

        started_at = time.monotonic()
        result = asyncio.run(
            _run_with_sigint(runner=runner, config=config, context=context)
        )
        elapsed_seconds = time.monotonic() - started_at

        rendered = _render_payload(result=result, output_mode=output_mode)
        if output is None:
            typer.echo(rendered)
        else:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(rendered + "\n", encoding="utf-8")

        _print_summary(result=result, elapsed_seconds=elapsed_seconds)

    except KeyboardInterrupt:
        typer.echo("Run interrupted.", err=True)
        sys.exit(_EXIT_CANCELLED)
    except CompassError as exc:
        typer.echo(str(exc), err=True)
        sys.exit(1)

    if result.cancelled:
        sys.exit(_EXIT_CANCELLED)


if __name__ == "__main__":
    app()
