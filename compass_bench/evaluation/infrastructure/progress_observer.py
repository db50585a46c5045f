"""ProgressRunObserver — renders a Rich progress bar with outcome tallies to stderr."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text


class _CountsColumn(ProgressColumn):
    """Renders done+inflight/total with colors matching the bar segments."""

    def render(self, task: Task) -> Text:
        done = int(task.completed)
        inflight = int(task.fields.get("inflight", 0))
        total = int(task.total or 0)
        return Text.assemble(
            (str(done), "bright_green"),
            ("+", "dim white"),
            (str(inflight), "grey50"),
            ("/", "dim white"),
            (str(total), "default"),
        )


class _SegmentedBarColumn(ProgressColumn):
    """Bar with a done segment, an in-flight segment and the remainder."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        total = task.total or 0
        if total > 0:
            done_cells = int(task.completed / total * self.bar_width)
            inflight = int(task.fields.get("inflight", 0))
            inflight_cells = min(
                int(inflight / total * self.bar_width), self.bar_width - done_cells
            )
        else:
            done_cells = 0
            inflight_cells = 0
        remaining_cells = self.bar_width - done_cells - inflight_cells

        result = Text()
        result.append("█" * done_cells, style="bright_green")
        result.append("▒" * inflight_cells, style="grey50")
        result.append("░" * remaining_cells, style="dim white")
        return result


class _OutcomeColumn(ProgressColumn):
    """Running SUCCESS / PARTIAL / FAIL tallies."""

    def render(self, task: Task) -> Text:
        return Text.assemble(
            (f"✓{task.fields.get('success', 0)}", "green"),
            " ",
            (f"~{task.fields.get('partial', 0)}", "yellow"),
            " ",
            (f"✗{task.fields.get('fail', 0)}", "red"),
        )


class ProgressRunObserver:
    """Renders one progress row for the whole run on stderr.

    Only run and task lifecycle events produce output. Pass ``disabled=True``
    to keep the counters without rendering anything (useful in tests).

    Does NOT inherit from RunObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self.inflight = 0
        self.completed = 0
        self.tallies: dict[str, int] = {"success": 0, "partial": 0, "fail": 0}

    def _refresh(self) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=self.completed,
            inflight=self.inflight,
            **self.tallies,
        )

    def _finish_task(self, outcome: str) -> None:
        self.inflight = max(0, self.inflight - 1)
        self.tallies[outcome] += 1
        self._refresh()

    def run_started(
        self,
        run_id: str,
        total_prompts: int,
        iterations: int,
        concurrency: int,
        total_tasks: int,
    ) -> None:
        self.inflight = 0
        self.completed = 0
        self.tallies = {"success": 0, "partial": 0, "fail": 0}

        if self._disabled:
            return

        self._progress = Progress(
            TextColumn("[bold]{task.description}[/bold]"),
            _SegmentedBarColumn(bar_width=40),
            _CountsColumn(),
            _OutcomeColumn(),
            TimeElapsedColumn(),
            TextColumn("eta"),
            TimeRemainingColumn(),
            console=Console(stderr=True),
            refresh_per_second=10,
            transient=False,
        )
        self._task_id = self._progress.add_task(
            description=f"{total_prompts} prompts × {iterations}",
            total=float(total_tasks),
            inflight=0,
            **self.tallies,
        )
        self._progress.start()

    def run_completed(
        self, run_id: str, total_results: int, elapsed_seconds: float
    ) -> None:
        if self._progress is not None:
            self._refresh()
            self._progress.stop()
        self._progress = None
        self._task_id = None

    def run_cancelled(self, run_id: str, pending: int) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, description="cancelling")

    def run_progress(self, run_id: str, completed: int, total: int) -> None:
        self.completed = completed
        self._refresh()

    def task_started(self, run_id: str, prompt_id: str, iteration: int) -> None:
        self.inflight += 1
        self._refresh()

    def task_completed(
        self,
        run_id: str,
        prompt_id: str,
        iteration: int,
        classification: str,
        points: float,
    ) -> None:
        self._finish_task(outcome=classification.lower())

    def task_failed(
        self, run_id: str, prompt_id: str, iteration: int, reason: str
    ) -> None:
        self._finish_task(outcome="fail")

    def task_cancelled(self, run_id: str, prompt_id: str, iteration: int) -> None:
        pass
