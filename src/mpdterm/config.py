"""Configuration management for mpdterm.

Provides the EffectiveConfig dataclass and resolve_config(), which merges every
configuration source into it. Each setting is resolved on its own against the
same chain, lowest priority first:

    compiled-in default < configuration files (later file wins) < environment < explicit CLI flag

The resolved config is published once by main() and read through get_config().
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from .errors import EnvironmentVariableError
from .options import RawOptions, parse_decimal
from .paths import EnvironmentSnapshot, expand_home
from .screens import ScreenType
from .settings import read_config_files

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600
DEFAULT_CONNECTION_TIMEOUT = 5


@dataclass(frozen=True)
class EffectiveConfig:
    """Fully resolved startup settings.

    Directories are absolute once resolved; startup_slave_screen is None when no
    slave screen was requested.
    """

    host: str
    port: int
    music_dir: Path
    ncmpcpp_directory: Path
    lyrics_directory: Path
    bindings_path: Path
    password: str = ""
    connection_timeout: int = DEFAULT_CONNECTION_TIMEOUT
    startup_screen: ScreenType = ScreenType.PLAYLIST
    startup_slave_screen: ScreenType | None = None
    ignore_config_errors: bool = False
    config_paths: tuple[Path, ...] = field(default=())


def compiled_defaults(home: str) -> dict[str, Any]:
    """Compiled-in defaults, with `~` expanded against `home`."""
    return {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "password": "",
        "music_dir": Path(expand_home("~/music", home)),
        "ncmpcpp_directory": Path(expand_home("~/.ncmpcpp/", home)),
        "lyrics_directory": Path(expand_home("~/.lyrics/", home)),
        "connection_timeout": DEFAULT_CONNECTION_TIMEOUT,
        "startup_screen": ScreenType.PLAYLIST,
        "startup_slave_screen": None,
    }


def split_host(host: str) -> tuple[str, str | None]:
    """Split MPD's `password@host` form. Returns (host, password or None).

    A leading `@` denotes an abstract socket name and is not a password separator.
    """
    at = host.find("@")
    if at > 0:
        return host[at + 1 :], host[:at]
    return host, None


def _apply_host(settings: dict[str, Any], host: str) -> None:
    hostname, password = split_host(host)
    settings["host"] = hostname
    settings["password"] = password or ""


def _env_port(env: EnvironmentSnapshot) -> int:
    try:
        return parse_decimal(env.mpd_port)
    except ValueError:
        raise EnvironmentVariableError(f"MPD_PORT is not a valid port number: {env.mpd_port!r}")


def resolve_config(options: RawOptions, env: EnvironmentSnapshot) -> EffectiveConfig:
    """Merge defaults, configuration files, environment and command line into an EffectiveConfig.

    Args:
        options: Parsed command line
        env: Environment snapshot taken at startup

    Returns:
        EffectiveConfig before screen validation and bindings path resolution

    Raises:
        EnvironmentVariableError: If HOME is not set (before any file is read) or MPD_PORT is malformed
        ConfigFileError: If a configuration file is invalid and errors are not ignored
    """
    home = env.require_home()
    ignore_errors = bool(options.value("ignore_config_errors"))
    config_paths = tuple(Path(expand_home(p, home)) for p in options.value("config"))

    settings = compiled_defaults(home)
    file_settings = read_config_files(config_paths, home, ignore_errors=ignore_errors)
    if "host" in file_settings:
        _apply_host(settings, file_settings.pop("host"))
    settings.update(file_settings)

    # MPD_HOST / MPD_PORT take precedence over configuration files.
    if env.mpd_host is not None:
        _apply_host(settings, env.mpd_host)
        logger.debug(f"Using MPD_HOST from environment: {settings['host']}")
    if env.mpd_port is not None:
        settings["port"] = _env_port(env)
        logger.debug(f"Using MPD_PORT from environment: {settings['port']}")

    # Flags left at their defaults override nothing.
    if options.explicit("host"):
        _apply_host(settings, options.value("host"))
    if options.explicit("port"):
        settings["port"] = options.value("port")

    # The bindings file lives in the resolved application directory unless --bindings overrides it.
    settings["bindings_path"] = settings["ncmpcpp_directory"] / "bindings"
    config = EffectiveConfig(**settings, ignore_config_errors=ignore_errors, config_paths=config_paths)
    logger.debug(f"Resolved connection: {config.host}:{config.port} (timeout {config.connection_timeout}s)")
    return config


CONFIG: EffectiveConfig | None = None


def publish_config(config: EffectiveConfig) -> None:
    """Make `config` the process-wide effective configuration. Called once by main()."""
    global CONFIG
    CONFIG = config


def get_config() -> EffectiveConfig:
    """Returns the global CONFIG instance.

    Raises:
        RuntimeError: If CONFIG has not been published by main()
    """
    if CONFIG is None:
        raise RuntimeError("Configuration has not been resolved yet")
    return CONFIG
