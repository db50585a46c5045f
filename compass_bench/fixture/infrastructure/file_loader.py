"""File fixture loader — reads a JSON or YAML fixture into a typed Fixture."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from compass_bench.fixture.domain.fixture import Fixture
from compass_bench.fixture.domain.observer import FixtureObserver
from compass_bench.fixture.infrastructure.errors import (
    FixtureLoadError,
    FixtureNotFoundError,
    FixtureParseError,
)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class FileFixtureLoader:
    """Loads a fixture file. `.yaml`/`.yml` are parsed as YAML, anything else as JSON."""

    def __init__(self, observer: FixtureObserver) -> None:
        self._observer = observer

    def load(self, ref: Path) -> Fixture:
        """
        Load and validate the fixture at ref.

        Criteria blocks are resolved to their concrete model here, so an unknown
        criteria kind is reported as a parse error before any dispatch.

        Raises:
            FixtureNotFoundError: if ref does not exist.
            FixtureParseError: if the content cannot be decoded or violates the schema.
        """
        path_str = str(ref)
        self._observer.fixture_loading_started(path=path_str)

        try:
            raw = self._read(path=ref)
            fixture = self._build(path=ref, raw=raw)
        except FixtureLoadError as exc:
            self._observer.fixture_loading_failed(path=path_str, reason=exc.reason)
            raise

        self._observer.fixture_loading_completed(
            path=path_str,
            total_prompts=len(fixture.prompts),
            agent_type=fixture.agent.type,
        )
        return fixture

    def _read(self, path: Path) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise FixtureNotFoundError(path=path) from exc

        try:
            if path.suffix.lower() in _YAML_SUFFIXES:
                return yaml.safe_load(text)
            return json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise FixtureParseError(path=path, detail=str(exc)) from exc

    def _build(self, path: Path, raw: Any) -> Fixture:
        if not isinstance(raw, dict):
            raise FixtureParseError(path=path, detail="top-level object expected")
        try:
            return Fixture.model_validate(raw)
        except ValidationError as exc:
            raise FixtureParseError(path=path, detail=_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    """Flatten every pydantic error into one line: `loc: message; loc: message`."""
    parts: list[str] = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error["loc"]) or "<root>"
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)
