"""Parse → analyze → redact → export, wired together.

Usage:

    scrubber = DocumentScrubber.create()
    file = InputFile.from_path("report.pdf")

    document = scrubber.parse(file)
    items = scrubber.analyze(document)          # high-confidence items pre-selected
    redacted = scrubber.redact(document, items)
    scrubber.export(redacted, "out/")           # out/redacted_report.pdf (plain text)

Or in one go, with extra literals to remove everywhere:

    redacted, items = scrubber.scrub(file, custom_terms=["Project Falcon"])
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .analyzer import AnalyzerConfig, SensitiveDataAnalyzer
from .errors import UnsupportedFormatError
from .export import save_as_text
from .parsers import ParserRegistry, create_default_registry
from .redaction import RedactionEngine
from .types import InputFile, ParsedDocument, RedactionOptions, SensitiveItem

logger = logging.getLogger(__name__)


@dataclass
class DocumentScrubber:
    """Composition root for the three pipeline stages."""

    registry: ParserRegistry
    analyzer: SensitiveDataAnalyzer
    engine: RedactionEngine = field(default_factory=RedactionEngine)
    options: RedactionOptions = field(default_factory=RedactionOptions)

    @classmethod
    def create(
        cls,
        *,
        config: AnalyzerConfig | None = None,
        options: RedactionOptions | None = None,
        registry: ParserRegistry | None = None,
    ) -> "DocumentScrubber":
        """Factory — default registry, analyzer and options unless given."""
        return cls(
            registry=registry or create_default_registry(),
            analyzer=SensitiveDataAnalyzer(config),
            options=options or RedactionOptions(),
        )

    def parse(self, file: InputFile) -> ParsedDocument:
        """Parse with the first registered parser that supports the file."""
        parser = self.registry.get_parser_for_file(file)
        if parser is None:
            raise UnsupportedFormatError(file.name)
        return parser.parse(file)

    def analyze(self, document: ParsedDocument) -> list[SensitiveItem]:
        return self.analyzer.analyze(document)

    def redact(
        self,
        document: ParsedDocument,
        items: list[SensitiveItem],
        options: RedactionOptions | None = None,
    ) -> ParsedDocument:
        """Redact the ``selected`` items. Nothing selected → ``document`` itself."""
        selected = [item for item in items if item.selected]
        if not selected:
            logger.info("Nothing selected for redaction in %s", document.filename)
        return self.engine.apply_redactions(document, selected, options or self.options)

    def scrub(
        self,
        file: InputFile,
        custom_terms: Iterable[str] = (),
    ) -> tuple[ParsedDocument, list[SensitiveItem]]:
        """Full pipeline. Returns the redacted document and every item considered."""
        document = self.parse(file)
        items = self.analyze(document)
        items.extend(SensitiveItem.custom(term) for term in custom_terms if term)
        return self.redact(document, items), items

    def export(self, document: ParsedDocument, directory: str | Path = ".") -> Path:
        return save_as_text(document, directory)
