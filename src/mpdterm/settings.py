"""Configuration file reader.

Files are line oriented: `name = value`, with `#` comments and optional double
quotes around the value. Each file yields a dict of the settings it defines;
read_config_files() folds a list of files so later files win.

A missing file is skipped. Lines are decoded one at a time, so an undecodable
line is just another invalid line. An unknown name or an invalid value raises
ConfigFileError, or is logged and skipped when ignore_errors is set.
"""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from loguru import logger

from .errors import ConfigFileError
from .options import parse_decimal
from .paths import expand_home
from .screens import ScreenType, screen_from_name


def _parse_port(value: str, home: str) -> int:
    port = parse_decimal(value)
    if not 0 < port < 65536:
        raise ValueError(f"port out of range: {port}")
    return port


def _parse_timeout(value: str, home: str) -> int:
    timeout = parse_decimal(value)
    if timeout <= 0:
        raise ValueError(f"timeout must be positive: {timeout}")
    return timeout


def _parse_host(value: str, home: str) -> str:
    if not value:
        raise ValueError("host must not be empty")
    return value


def _parse_path(value: str, home: str) -> Path:
    return Path(expand_home(value, home))


def _parse_screen(value: str, home: str) -> ScreenType:
    screen = screen_from_name(value)
    if screen is None:
        raise ValueError(f"unknown screen: {value}")
    return screen


def _parse_optional_screen(value: str, home: str) -> ScreenType | None:
    return _parse_screen(value, home) if value else None


# name in the file -> (EffectiveConfig field, converter)
DIRECTIVES: dict[str, tuple[str, Callable[[str, str], Any]]] = {
    "mpd_host": ("host", _parse_host),
    "mpd_port": ("port", _parse_port),
    "mpd_music_dir": ("music_dir", _parse_path),
    "mpd_connection_timeout": ("connection_timeout", _parse_timeout),
    "ncmpcpp_directory": ("ncmpcpp_directory", _parse_path),
    "lyrics_directory": ("lyrics_directory", _parse_path),
    "startup_screen": ("startup_screen", _parse_screen),
    "startup_slave_screen": ("startup_slave_screen", _parse_optional_screen),
}


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def parse_line(line: str, home: str) -> tuple[str, Any] | None:
    """Parse one line into (field, value). Returns None for blank lines and comments.

    Raises:
        ValueError: If the line is not a recognized `name = value` directive
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    if "=" not in line:
        raise ValueError(f"expected 'name = value', got {line!r}")
    name, value = (part.strip() for part in line.split("=", 1))
    if name not in DIRECTIVES:
        raise ValueError(f"unknown option: {name}")
    field, convert = DIRECTIVES[name]
    try:
        return field, convert(_unquote(value), home)
    except ValueError as e:
        raise ValueError(f"invalid value for {name}: {e}")


def read_config_file(path: Path, home: str, ignore_errors: bool = False) -> dict[str, Any] | None:
    """Read one configuration file.

    Args:
        path: File to read, already `~`-expanded
        home: Resolved home directory, for `~` in path-valued settings
        ignore_errors: Log and skip invalid lines instead of raising

    Returns:
        The settings the file defines, or None if the file does not exist
    """
    try:
        data = path.read_bytes()
    except (FileNotFoundError, NotADirectoryError):
        logger.debug(f"{path}: Not found, skipping")
        return None
    except OSError as e:
        raise ConfigFileError(path, None, f"cannot read file: {e}")

    settings: dict[str, Any] = {}
    for lineno, raw in enumerate(data.splitlines(), start=1):
        try:
            parsed = parse_line(raw.decode("utf-8"), home)
        except ValueError as e:
            if not ignore_errors:
                raise ConfigFileError(path, lineno, str(e))
            logger.warning(f"{path}:{lineno}: {e} (ignored)")
            continue
        if parsed is not None:
            field, value = parsed
            settings[field] = value
    logger.debug(f"{path}: Read {len(settings)} settings")
    return settings


def read_config_files(paths: Iterable[Path], home: str, ignore_errors: bool = False) -> dict[str, Any]:
    """Read every existing file in order; settings from later files override earlier ones."""
    merged: dict[str, Any] = {}
    found = 0
    for path in paths:
        settings = read_config_file(path, home, ignore_errors)
        if settings is None:
            continue
        found += 1
        merged.update(settings)
    if not found:
        logger.debug("No configuration file found, using compiled-in defaults")
    return merged
