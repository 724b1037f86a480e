"""Path helpers and the environment snapshot.

The environment is captured once into an EnvironmentSnapshot and passed around
explicitly. Defaults that depend on the environment (the XDG base directory, the
candidate configuration files) are pure functions of that snapshot.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import EnvironmentVariableError

FALLBACK_CONFIG_BASE_DIR = "~/.config/"
LEGACY_CONFIG_PATH = "~/.ncmpcpp/config"
DEFAULT_BINDINGS_PATH = "~/.ncmpcpp/bindings"


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Read-only view of the environment variables startup depends on."""

    home: str | None = None
    xdg_config_home: str | None = None
    mpd_host: str | None = None
    mpd_port: str | None = None

    @classmethod
    def capture(cls, environ: Mapping[str, str] | None = None) -> "EnvironmentSnapshot":
        """Capture the relevant variables from `environ` (defaults to os.environ)."""
        if environ is None:
            environ = os.environ
        return cls(
            home=environ.get("HOME"),
            xdg_config_home=environ.get("XDG_CONFIG_HOME"),
            mpd_host=environ.get("MPD_HOST"),
            mpd_port=environ.get("MPD_PORT"),
        )

    def require_home(self) -> str:
        """Return the home directory, which every `~` expansion depends on.

        Raises:
            EnvironmentVariableError: If HOME was not set when the snapshot was taken
        """
        if self.home is None:
            raise EnvironmentVariableError("HOME environment variable is not defined")
        return self.home


def expand_home(path: str, home: str | None) -> str:
    """Replace a leading `~` in `path` with `home`. Other paths are returned unchanged."""
    if home is None:
        raise EnvironmentVariableError(f"cannot expand {path!r}: home directory is not resolved")
    if path.startswith("~"):
        return home + path[1:]
    return path


def ensure_trailing_separator(path: str) -> str:
    """Append a `/` to a non-empty path that lacks one."""
    if path and not path.endswith("/"):
        return path + "/"
    return path


def default_config_base_dir(env: EnvironmentSnapshot) -> str:
    """Base configuration directory: XDG_CONFIG_HOME if set, else ~/.config/."""
    if env.xdg_config_home is None:
        return FALLBACK_CONFIG_BASE_DIR
    return ensure_trailing_separator(env.xdg_config_home)


def default_config_paths(env: EnvironmentSnapshot) -> list[str]:
    """Candidate configuration files, lowest priority first."""
    return [LEGACY_CONFIG_PATH, default_config_base_dir(env) + "ncmpcpp/config"]
