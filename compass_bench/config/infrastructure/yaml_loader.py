"""YAML run-config loader — parses, interpolates env vars, validates, emits events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from compass_bench.config.domain.config import RunConfig
from compass_bench.config.domain.observer import ConfigObserver
from compass_bench.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from compass_bench.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from compass_bench.config.infrastructure.validation import validate_run_config


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a RunConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> RunConfig:
        """
        Load, interpolate, validate, and return a RunConfig from a YAML file.

        Relative `fixture` and `agent.repo_path` entries are resolved against
        the directory containing the config file.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated or a semantic check fails.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = interpolate(raw)
        resolved = _resolve_relative_paths(interpolated=interpolated, base=path.parent)
        cfg = _build_config(resolved=resolved)
        validate_run_config(config=cfg)
        if cfg.agent.allow_full_access:
            self._observer.config_full_access_warning()
        self._observer.config_loaded(
            fixture=str(cfg.fixture),
            iterations=cfg.iterations,
            concurrency=cfg.concurrency,
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc

    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top-level mapping expected")
    return raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _resolve_relative_paths(interpolated: Any, base: Path) -> Any:
    resolved = dict(interpolated)

    fixture = resolved.get("fixture")
    if isinstance(fixture, str) and not Path(fixture).is_absolute():
        resolved["fixture"] = str(base / fixture)

    agent = resolved.get("agent")
    if isinstance(agent, dict):
        repo_path = agent.get("repo_path")
        if isinstance(repo_path, str) and not Path(repo_path).is_absolute():
            resolved["agent"] = {**agent, "repo_path": str(base / repo_path)}

    return resolved


def _build_config(resolved: Any) -> RunConfig:
    try:
        return RunConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(reason=str(exc)) from exc
