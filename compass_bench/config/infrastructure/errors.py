"""Error types raised by config infrastructure."""

from pathlib import Path

from compass_bench.core.errors import CompassError


class MissingEnvVarsError(CompassError):
    """Raised when one or more required environment variables are not set."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        var_list = ", ".join(sorted(missing_vars))
        super().__init__(
            f"Failed to load config: missing environment variables: {var_list}"
        )


class ConfigValidationError(CompassError):
    """Raised when a run config fails validation. Fatal, raised before dispatch."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to validate config: {reason}")


class ConfigLoadError(CompassError):
    """Raised when the config file cannot be opened or parsed."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load config: {reason}: {path}")
