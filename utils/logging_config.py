"""Rich console logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbose=False, quiet=False):
    """Configure the root logger with a Rich handler on stderr."""
    level = logging.DEBUG if verbose else (logging.ERROR if quiet else logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # The SDK's HTTP client logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
