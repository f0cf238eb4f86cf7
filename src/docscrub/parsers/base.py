"""Parser contract and the shared section/offset bookkeeping."""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod

from ..errors import ParseError
from ..types import (
    DocumentMetadata,
    DocumentSection,
    FileType,
    InputFile,
    ParsedDocument,
    SectionPosition,
    SectionType,
)
from ..utils import count_words, generate_id

logger = logging.getLogger(__name__)


class SectionBuilder:
    """Accumulates sections and the text they index into.

    Each section starts at the current accumulated length and is followed by a
    single newline, so ``text`` is the newline-join of all sections plus a
    trailing newline.
    """

    __slots__ = ("sections", "_parts", "_length", "word_count", "character_count")

    def __init__(self) -> None:
        self.sections: list[DocumentSection] = []
        self._parts: list[str] = []
        self._length = 0
        self.word_count = 0
        self.character_count = 0

    def add(
        self,
        content: str,
        section_type: SectionType = SectionType.PARAGRAPH,
    ) -> DocumentSection | None:
        """Append a section; content that is empty after trimming is dropped."""
        text = content.strip()
        if not text:
            return None

        start = self._length
        section = DocumentSection(
            id=generate_id(),
            type=section_type,
            content=text,
            position=SectionPosition(start=start, end=start + len(text)),
        )
        self.sections.append(section)
        self._parts.append(text)
        self._parts.append("\n")
        self._length += len(text) + 1
        self.word_count += count_words(text)
        self.character_count += len(text)
        return section

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def build(
        self,
        file: InputFile,
        file_type: FileType,
        *,
        content: str | None = None,
        metadata: DocumentMetadata | None = None,
    ) -> ParsedDocument:
        """Assemble the document. ``metadata`` counts default to the builder's."""
        if metadata is None:
            metadata = DocumentMetadata()
        if not metadata.word_count:
            metadata.word_count = self.word_count
        if not metadata.character_count:
            metadata.character_count = self.character_count
        return ParsedDocument(
            content=self.text if content is None else content,
            metadata=metadata,
            sections=self.sections,
            filename=file.name,
            file_type=file_type,
            file_size=file.size,
        )


class DocumentParser(ABC):
    """One implementation per format.

    Subclasses set ``file_type`` (the registry key), ``extensions`` and
    ``mime_types``, and implement ``extract``.
    """

    file_type: str
    extensions: tuple[str, ...] = ()
    mime_types: tuple[str, ...] = ()

    def supports(self, file: InputFile) -> bool:
        if file.mime_type and file.mime_type in self.mime_types:
            return True
        return file.name.lower().endswith(self.extensions)

    def parse(self, file: InputFile) -> ParsedDocument:
        """Parse ``file``; any extraction failure becomes a ``ParseError``."""
        logger.debug("Parsing %s with %s parser", file.name, self.file_type)
        try:
            document = self.extract(file)
        except ParseError:
            raise
        except Exception as e:
            logger.error("Error parsing %s: %s", file.name, e)
            raise ParseError(file.name, e) from e
        logger.debug(
            "Parsed %s: %d sections, %d words",
            file.name, len(document.sections), document.metadata.word_count,
        )
        return document

    @abstractmethod
    def extract(self, file: InputFile) -> ParsedDocument:
        """Format-specific extraction."""
