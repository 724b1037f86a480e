"""Startup pipeline: parse options, merge sources, validate, then bootstrap.

configure() runs every stage in order and returns either a Terminate (help or
version was requested) or a Startup holding the effective configuration and the
key bindings. Failures are raised as ConfigurationError subclasses; nothing is
published until every stage has succeeded.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger

from .bindings import Bindings, load_bindings
from .config import EffectiveConfig, resolve_config
from .errors import ResourceError, ValidationError
from .options import RawOptions, Terminate, parse_options
from .paths import EnvironmentSnapshot, expand_home
from .screens import ScreenType, screen_from_name


@dataclass(frozen=True)
class Startup:
    config: EffectiveConfig
    bindings: Bindings


def _lookup_screen(name: str, label: str) -> ScreenType:
    screen = screen_from_name(name)
    if screen is None:
        raise ValidationError(f"Unknown {label}: {name}")
    return screen


def validate(config: EffectiveConfig, options: RawOptions, home: str) -> EffectiveConfig:
    """Apply --screen, --slave-screen and --bindings, and check domain constraints.

    Raises:
        ValidationError: For an unknown screen name, an empty host or an out-of-range value
    """
    changes = {}
    if options.value("screen") is not None:
        changes["startup_screen"] = _lookup_screen(options.value("screen"), "screen")
    if options.value("slave_screen") is not None:
        changes["startup_slave_screen"] = _lookup_screen(options.value("slave_screen"), "slave screen")
    if options.explicit("bindings"):
        changes["bindings_path"] = Path(expand_home(options.value("bindings"), home))
    config = replace(config, **changes)

    if not config.host:
        raise ValidationError("Host must not be empty")
    if not 0 < config.port < 65536:
        raise ValidationError(f"Port out of range: {config.port}")
    if config.connection_timeout <= 0:
        raise ValidationError(f"Connection timeout must be positive: {config.connection_timeout}")
    return config


def create_directories(config: EffectiveConfig) -> None:
    """Create the application and lyrics directories if they do not exist.

    Raises:
        ResourceError: If a directory cannot be created
    """
    for directory in (config.ncmpcpp_directory, config.lyrics_directory):
        if directory.is_dir():
            continue
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResourceError(f"cannot create directory {directory}: {e.strerror or e}")
        logger.info(f"Created directory {directory}")


def bootstrap(config: EffectiveConfig, options: RawOptions, env: EnvironmentSnapshot) -> Startup:
    """Validate the merged config, create its directories and load key bindings."""
    config = validate(config, options, env.require_home())
    create_directories(config)
    bindings = load_bindings(config.bindings_path)
    return Startup(config=config, bindings=bindings)


def configure(argv: Sequence[str], environ: Mapping[str, str] | None = None) -> Startup | Terminate:
    """Run the whole startup configuration sequence.

    Args:
        argv: Command-line arguments, without the program name
        environ: Environment to snapshot (defaults to os.environ)

    Returns:
        Terminate if --help or --version was given, otherwise Startup

    Raises:
        ConfigurationError: If any stage fails
    """
    env = EnvironmentSnapshot.capture(environ)
    options = parse_options(argv, env)
    if isinstance(options, Terminate):
        return options
    config = resolve_config(options, env)
    return bootstrap(config, options, env)
