"""Parser registry — maps a file-type key to its parser instance.

Build one per application and hand it to whatever needs to parse:

    registry = ParserRegistry()
    registry.register(TXTParser())
    registry.register(OfficeParser())     # fallback last

    parser = registry.get_parser_for_file(file)

Lookups by file walk parsers in registration order, so a generic parser that
overlaps specialized ones must be registered after them.
"""

from __future__ import annotations
import logging

from ..types import InputFile
from .base import DocumentParser

logger = logging.getLogger(__name__)

# Registry key → extensions offered in file pickers
EXTENSIONS_BY_TYPE: dict[str, tuple[str, ...]] = {
    "pdf": (".pdf",),
    "docx": (".docx", ".doc"),
    "txt": (".txt",),
    "csv": (".csv",),
    "xlsx": (".xlsx", ".xls"),
    "pptx": (".pptx", ".ppt"),
    "html": (".html", ".htm"),
    "md": (".md", ".markdown"),
    # Zip containers only; .pdf belongs to the pdf key.
    "office": (".docx", ".pptx", ".xlsx", ".odt", ".odp", ".ods"),
}


class ParserRegistry:
    """Ordered collection of parsers keyed by ``parser.file_type``."""

    __slots__ = ("_parsers",)

    def __init__(self) -> None:
        self._parsers: dict[str, DocumentParser] = {}

    def register(self, parser: DocumentParser) -> None:
        """Register ``parser``; a later registration for the same key replaces it."""
        self._parsers[parser.file_type] = parser
        logger.info("Registered parser for file type: %s", parser.file_type)

    def get_parser_for_file(self, file: InputFile) -> DocumentParser | None:
        for parser in self._parsers.values():
            if parser.supports(file):
                return parser
        return None

    def get_parser_for_type(self, file_type: str) -> DocumentParser | None:
        return self._parsers.get(file_type)

    def has_parser_for_file(self, file: InputFile) -> bool:
        return self.get_parser_for_file(file) is not None

    @property
    def file_types(self) -> list[str]:
        return list(self._parsers)

    def get_supported_extensions(self) -> list[str]:
        """Deduplicated extensions for every registered key, in registration order."""
        extensions: dict[str, None] = {}
        for file_type in self._parsers:
            for ext in EXTENSIONS_BY_TYPE.get(file_type, ()):
                extensions[ext] = None
        return list(extensions)

    def get_supported_file_types(self) -> str:
        """Extensions formatted for a file-picker filter, e.g. ``.pdf, .txt``."""
        return ", ".join(self.get_supported_extensions())
