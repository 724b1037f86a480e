"""Command-line option surface.

Declares every flag the client accepts and parses argv into RawOptions, a mapping
from option name to an OptionValue that records whether the user supplied the flag.
Precedence later in startup depends on that origin, not on the value itself.

Parsing is syntax-only. --help and --version are detected before anything else
and produce a Terminate result instead of RawOptions.
"""

import argparse
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from . import __version__
from .errors import CommandLineError
from .paths import DEFAULT_BINDINGS_PATH, EnvironmentSnapshot, default_config_paths
from .screens import STARTUP_SCREENS

PROG = "mpdterm"
HELP_FLAGS = ("--help", "-?")
VERSION_FLAGS = ("--version", "-v")

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def parse_bool(text: str) -> bool:
    """Parse a boolean flag value such as `true`, `no` or `1`."""
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean value: {text!r}")


def parse_decimal(text: str) -> int:
    """Parse a plain decimal number. Signs, underscores and surrounding whitespace are rejected."""
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"invalid decimal value: {text!r}")
    return int(text)


@dataclass(frozen=True)
class Option:
    """Declaration of one command-line flag."""

    name: str
    long: str
    short: str | None
    kind: type
    default: Any
    help: str
    multiple: bool = False
    metavar: str | None = None

    @property
    def flags(self) -> list[str]:
        """Option strings passed to argparse, long form first."""
        return [self.long] if self.short is None else [self.long, self.short]


@dataclass(frozen=True)
class OptionValue:
    """A parsed value and whether the user supplied it on the command line."""

    value: Any
    explicit: bool


class RawOptions(Mapping[str, OptionValue]):
    """Parsed command-line values keyed by option name."""

    def __init__(self, values: dict[str, OptionValue]):
        self._values = values

    def __getitem__(self, name: str) -> OptionValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RawOptions({self._values!r})"

    def value(self, name: str) -> Any:
        """Return the value of `name`, whether explicit or defaulted."""
        return self._values[name].value

    def explicit(self, name: str) -> bool:
        """True if the user supplied `name` on the command line."""
        return self._values[name].explicit


@dataclass(frozen=True)
class Terminate:
    """Help or version was requested: print `text` and exit successfully."""

    text: str


def declare_options(env: EnvironmentSnapshot) -> tuple[Option, ...]:
    """Return the flag declarations. Config file defaults depend on XDG_CONFIG_HOME."""
    return (
        Option("host", "--host", "-h", str, "localhost", "connect to server at host"),
        Option("port", "--port", "-p", int, 6600, "connect to server at port"),
        Option(
            "config",
            "--config",
            "-c",
            str,
            default_config_paths(env),
            "specify configuration file(s)",
            multiple=True,
            metavar="PATH",
        ),
        Option(
            "ignore_config_errors",
            "--ignore-config-errors",
            None,
            bool,
            False,
            "ignore unknown and invalid options in configuration files",
        ),
        Option("bindings", "--bindings", "-b", str, DEFAULT_BINDINGS_PATH, "specify bindings file", metavar="PATH"),
        Option("screen", "--screen", "-s", str, None, "specify initial screen", metavar="SCREEN"),
        Option("slave_screen", "--slave-screen", "-S", str, None, "specify initial slave screen", metavar="SCREEN"),
    )


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser that raises CommandLineError instead of exiting."""

    def error(self, message: str):
        raise CommandLineError(message, token=_offending_token(message))


def _offending_token(message: str) -> str | None:
    # argparse reports the culprit as "argument --port/-p: ..." or "unrecognized arguments: --foo"
    if message.startswith("unrecognized arguments: "):
        return message.removeprefix("unrecognized arguments: ").split()[0]
    if " value: '" in message:
        return message.rsplit(" value: '", 1)[1].removesuffix("'")
    if message.startswith("argument "):
        return message.removeprefix("argument ").split(":", 1)[0].split("/")[0]
    return None


def _describe_default(option: Option) -> str:
    if option.default is None:
        return ""
    if option.multiple:
        return f" (default: {' AND '.join(option.default)})"
    if option.kind is bool:
        return f" (default: {str(option.default).lower()})"
    return f" (default: {option.default})"


def build_parser(options: Sequence[Option]) -> argparse.ArgumentParser:
    """Build the argparse parser. Defaults are suppressed so only explicit flags land in the namespace."""
    parser = _OptionParser(prog=PROG, usage="%(prog)s [options]...", add_help=False, allow_abbrev=False)
    group = parser.add_argument_group("Options")
    for option in options:
        kwargs: dict[str, Any] = {
            "dest": option.name,
            "default": argparse.SUPPRESS,
            "help": (option.help + _describe_default(option)).replace("%", "%%"),
        }
        if option.kind is bool:
            kwargs.update(nargs="?", const=True, type=_bool_type, metavar="BOOL")
        else:
            value_type = _decimal_type if option.kind is int else option.kind
            kwargs.update(type=value_type, metavar=option.metavar or option.name.upper())
        if option.multiple:
            kwargs["action"] = "append"
        group.add_argument(*option.flags, **kwargs)
    group.add_argument(*HELP_FLAGS, action="store_true", default=argparse.SUPPRESS, help="show help message")
    group.add_argument(
        *VERSION_FLAGS, action="store_true", default=argparse.SUPPRESS, help="display version information"
    )
    return parser


def _decimal_type(text: str) -> int:
    try:
        return parse_decimal(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _bool_type(text: str) -> bool:
    try:
        return parse_bool(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def help_text(env: EnvironmentSnapshot) -> str:
    """Usage line followed by the option table."""
    return build_parser(declare_options(env)).format_help()


def version_text() -> str:
    """Version banner shown by --version."""
    screens = "".join(f" - {name}\n" for name in STARTUP_SCREENS)
    return f"{PROG} {__version__}\n\nstartup screens:\n{screens}"


def _requested_terminal_flag(argv: Sequence[str]) -> str | None:
    for token in argv:
        if token == "--":
            break
        if token in HELP_FLAGS:
            return "help"
        if token in VERSION_FLAGS:
            return "version"
    return None


def parse_options(argv: Sequence[str], env: EnvironmentSnapshot) -> RawOptions | Terminate:
    """Parse argv (without the program name) into RawOptions.

    Args:
        argv: Command-line arguments
        env: Environment snapshot, used only to compute default config file paths

    Returns:
        Terminate if --help or --version was given, otherwise RawOptions

    Raises:
        CommandLineError: For unknown flags, missing values or malformed values
    """
    requested = _requested_terminal_flag(argv)
    if requested == "help":
        return Terminate(help_text(env))
    if requested == "version":
        return Terminate(version_text())

    options = declare_options(env)
    namespace = vars(build_parser(options).parse_args(list(argv)))
    values = {}
    for option in options:
        if option.name in namespace:
            values[option.name] = OptionValue(namespace[option.name], explicit=True)
        else:
            default = list(option.default) if option.multiple else option.default
            values[option.name] = OptionValue(default, explicit=False)
    return RawOptions(values)
