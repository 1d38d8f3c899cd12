"""Package logger setup.

Library modules log through ``logging.getLogger(__name__)`` and never print;
the CLI calls ``configure_logging`` to route records to a Rich console.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("slamlog")
logger.addHandler(logging.NullHandler())


def configure_logging(level: int = logging.WARNING, console: Console | None = None) -> logging.Logger:
    """Attach a single RichHandler to the ``slamlog`` logger at ``level``."""
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
