"""Tests for the compass CLI — end-to-end runs with a scripted `command` agent."""

import json
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import Result
from typer.testing import CliRunner

from compass_bench.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    # The CLI binds structlog to the stderr stream CliRunner swaps in.
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_fixture(tmp_path: Path, script: str = "print('done')") -> Path:
    fixture = {
        "agent": {
            "type": "command",
            "command": [sys.executable, "-c", script],
        },
        "prompts": [
            {"id": "greet", "prompt": "Say done", "expected": "done"},
            {
                "id": "shout",
                "prompt": "Shout",
                "criteria": {"kind": "exact", "expected": "LOUD"},
            },
        ],
    }
    path = tmp_path / "fixture.json"
    path.write_text(json.dumps(fixture), encoding="utf-8")
    return path


def _write_config(tmp_path: Path, extra: str = "") -> Path:
    _write_fixture(tmp_path)
    path = tmp_path / "compass.yaml"
    path.write_text(
        "fixture: fixture.json\n"
        "iterations: 2\n"
        "concurrency: 2\n"
        "timeout_seconds: 60\n"
        "agent:\n"
        "  allow_full_access: false\n" + extra,
        encoding="utf-8",
    )
    return path


def _invoke(*args: str) -> Result:
    return runner.invoke(app, ["run", *args, "--no-progress", "--log-format", "json"])


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


class TestRunCommand:
    """`compass run` writes the JSON result and exits 0."""

    def test_detailed_output(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        out = tmp_path / "out" / "result.json"

        result = _invoke(str(config), "--output", str(out))

        assert result.exit_code == 0, result.output
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert list(payload) == ["iterationResults", "aggregatedResults"]
        assert [
            (item["promptId"], item["iteration"], item["classification"])
            for item in payload["iterationResults"]
        ] == [
            ("greet", 1, "SUCCESS"),
            ("greet", 2, "SUCCESS"),
            ("shout", 1, "FAIL"),
            ("shout", 2, "FAIL"),
        ]
        assert payload["aggregatedResults"] == [
            {"promptId": "greet", "iterations": 2, "averagePoints": 1.0},
            {"promptId": "shout", "iterations": 2, "averagePoints": 0.0},
        ]

    def test_aggregated_output_mode(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        out = tmp_path / "result.json"

        result = _invoke(str(config), "--output", str(out), "--output-mode", "aggregated")

        assert result.exit_code == 0, result.output
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert list(payload) == ["aggregatedResults"]

    def test_iteration_override(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        out = tmp_path / "result.json"

        result = _invoke(str(config), "--output", str(out), "-n", "3", "-c", "1")

        assert result.exit_code == 0, result.output
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert len(payload["iterationResults"]) == 6
        assert payload["aggregatedResults"][0]["iterations"] == 3


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestRunFailures:
    """Fatal errors print a message and exit 1 without writing a result."""

    def test_missing_config(self, tmp_path: Path) -> None:
        out = tmp_path / "result.json"

        result = _invoke(str(tmp_path / "absent.yaml"), "--output", str(out))

        assert result.exit_code == 1
        assert "Failed to load config" in result.output
        assert not out.exists()

    def test_invalid_iteration_override(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        out = tmp_path / "result.json"

        result = _invoke(str(config), "--output", str(out), "-n", "0")

        assert result.exit_code == 1
        assert "iterations must be at least 1" in result.output
        assert not out.exists()

    def test_unsupported_agent_type(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        (tmp_path / "fixture.json").write_text(
            json.dumps(
                {
                    "agent": {"type": "robot"},
                    "prompts": [{"id": "p", "prompt": "x", "expected": "x"}],
                }
            ),
            encoding="utf-8",
        )

        result = _invoke(str(config))

        assert result.exit_code == 1
        assert "unsupported agent type 'robot'" in result.output

    def test_invalid_output_mode(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)

        result = _invoke(str(config), "--output-mode", "verbose")

        assert result.exit_code == 1
        assert "Invalid output mode" in result.output
