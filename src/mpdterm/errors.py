"""Startup error taxonomy.

Every stage raises a ConfigurationError subclass. Only main() turns one into a
diagnostic line and an exit status; the stage label names where startup failed.
"""

from pathlib import Path


class ConfigurationError(Exception):
    """Base class for all startup configuration failures."""

    stage = "configuration"


class CommandLineError(ConfigurationError):
    """Raised for unknown flags or malformed flag values."""

    stage = "command line"

    def __init__(self, message: str, token: str | None = None) -> None:
        self.token = token
        super().__init__(message)


class EnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing or unusable."""

    stage = "environment"


class ConfigFileError(ConfigurationError):
    """Raised when a present configuration file contains an invalid directive."""

    stage = "configuration file"

    def __init__(self, path: Path, lineno: int | None, message: str) -> None:
        self.path = path
        self.lineno = lineno
        location = f"{path}:{lineno}" if lineno is not None else str(path)
        super().__init__(f"{location}: {message}")


class ValidationError(ConfigurationError):
    """Raised when a resolved value fails a domain constraint."""

    stage = "validation"


class ResourceError(ConfigurationError):
    """Raised when a directory cannot be created or the bindings file cannot be loaded."""

    stage = "resource"
