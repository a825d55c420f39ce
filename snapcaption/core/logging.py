"""
Purpose:
- One place to configure process logging (rich console handler).
- Modules only ever call logging.getLogger(__name__).
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

def setup_logging(level: str = "INFO") -> None:
    """Configure logging with rich handler."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(console=console, rich_tracebacks=True, show_path=False, show_time=False)
        ],
    )
    # httpx logs every request at INFO, which drowns out ours
    logging.getLogger("httpx").setLevel(logging.WARNING)
