from typing import Any


class StatmemprofError(Exception):
    """Exceptions raised in this package."""


class StatmemprofCommandError(StatmemprofError):
    """Exceptions raised from this package's CLI commands."""

    def __init__(self, *args: Any, exit_code: int) -> None:
        super().__init__(*args)
        self.exit_code = exit_code


class InvalidSampleError(StatmemprofError):
    """A sample record was rejected before it could be aggregated."""

    def __init__(self, message: str, *, record: Any) -> None:
        super().__init__(message)
        self.record = record


class ConfigurationError(StatmemprofError):
    """Invalid report configuration."""
