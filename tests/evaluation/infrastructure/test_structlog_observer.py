"""Tests for StructlogRunObserver event names and fields."""

from structlog.testing import capture_logs

from compass_bench.evaluation.infrastructure.observer import StructlogRunObserver


class TestStructlogRunObserver:
    def test_progress_event_includes_percent(self) -> None:
        with capture_logs() as logs:
            StructlogRunObserver().run_progress(run_id="r", completed=1, total=4)

        assert logs == [
            {
                "event": "evaluation.run.progress",
                "log_level": "info",
                "run_id": "r",
                "completed": 1,
                "total": 4,
                "percent": 25.0,
            }
        ]

    def test_cancelled_is_a_warning(self) -> None:
        with capture_logs() as logs:
            StructlogRunObserver().run_cancelled(run_id="r", pending=3)

        assert logs[0]["event"] == "evaluation.run.cancelled"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["pending"] == 3

    def test_task_failed_is_an_error(self) -> None:
        with capture_logs() as logs:
            StructlogRunObserver().task_failed(
                run_id="r", prompt_id="p", iteration=1, reason="boom"
            )

        assert logs[0]["event"] == "evaluation.task.failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["reason"] == "boom"
