"""Text exporter — writes a (redacted) document as a flat UTF-8 text file."""

from __future__ import annotations
import logging
from pathlib import Path

from .types import ParsedDocument

logger = logging.getLogger(__name__)


def save_as_text(document: ParsedDocument, directory: str | Path = ".") -> Path:
    """Write ``document.content`` to ``directory / document.filename``."""
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / Path(document.filename).name
    path.write_text(document.content, encoding="utf-8")
    logger.info("Saved %s (%d characters)", path, len(document.content))
    return path
