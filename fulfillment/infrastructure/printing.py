import logging
import re
from datetime import datetime
from pathlib import Path

from fulfillment.interfaces.IPrinter import IPrinter

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


class FilePrinter(IPrinter):
    """Spools each ticket into a directory watched by the print daemon."""

    def __init__(self, spool_dir: str):
        self.spool_dir = Path(spool_dir)
        self.spool_dir.mkdir(parents=True, exist_ok=True)

    def print_text(self, text: str, title: str) -> None:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        path = self.spool_dir / f"{stamp}-{_UNSAFE.sub('_', title)}.txt"
        path.write_text(text, encoding="utf-8")
        logger.info(f"🖨️ Spooled {title} to {path}")
