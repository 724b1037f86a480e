"""Application entry point.

main() runs the startup configuration sequence and is the only place that turns
its outcome into an exit status: help and version text go to stdout with status
0, any ConfigurationError becomes one diagnostic line on stderr with status 1.
On success the effective configuration is published for the rest of the client.
"""

import sys
from collections.abc import Sequence

from loguru import logger

from .bootstrap import configure
from .config import publish_config
from .errors import ConfigurationError
from .options import PROG, Terminate

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "WARNING") -> None:
    """Replace loguru's default sink with a stderr sink at `level`."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)


def report_failure(error: ConfigurationError) -> int:
    """Write a single diagnostic line for `error` and return the failure exit status."""
    print(f"{PROG}: {error.stage} error: {error}", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Resolve the startup configuration. Returns the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        result = configure(argv)
    except ConfigurationError as e:
        logger.debug(f"Startup aborted: {e!r}")
        return report_failure(e)

    if isinstance(result, Terminate):
        sys.stdout.write(result.text)
        return 0

    publish_config(result.config)
    logger.debug(f"Starting with screen {result.config.startup_screen.value}, bindings from {result.config.bindings_path}")
    return 0


def main_cli() -> None:
    """Console script entry point."""
    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
