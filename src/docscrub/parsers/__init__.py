"""Document parsers and the registry that dispatches between them."""

from __future__ import annotations
from typing import Iterable

from .base import DocumentParser, SectionBuilder
from .office import OfficeParser
from .pdf import PDFParser
from .registry import EXTENSIONS_BY_TYPE, ParserRegistry
from .rich import DOCXParser, HTMLParser, MarkdownParser
from .tabular import CSVParser, XLSXParser
from .text import TXTParser

# Default registration order: specialized parsers first, the generic
# office-container parser last.
PARSERS: dict[str, type[DocumentParser]] = {
    "txt": TXTParser,
    "csv": CSVParser,
    "xlsx": XLSXParser,
    "docx": DOCXParser,
    "html": HTMLParser,
    "md": MarkdownParser,
    "pdf": PDFParser,
    "office": OfficeParser,
}


def create_default_registry(file_types: Iterable[str] | None = None) -> ParserRegistry:
    """Build a registry with the given parser keys (default: all, in order)."""
    registry = ParserRegistry()
    for key in file_types if file_types is not None else PARSERS:
        if key not in PARSERS:
            raise ValueError(f"Unknown parser: {key!r} (expected one of {', '.join(PARSERS)})")
        registry.register(PARSERS[key]())
    return registry


__all__ = [
    "DocumentParser", "SectionBuilder",
    "ParserRegistry", "EXTENSIONS_BY_TYPE", "PARSERS", "create_default_registry",
    "TXTParser", "CSVParser", "XLSXParser",
    "DOCXParser", "HTMLParser", "MarkdownParser",
    "PDFParser", "OfficeParser",
]
