"""Plain text parser."""

from __future__ import annotations
import re

from ..types import DocumentMetadata, FileType, InputFile, ParsedDocument
from ..utils import count_words
from .base import DocumentParser, SectionBuilder

_BLANK_LINE = re.compile(r"\n\s*\n")


class TXTParser(DocumentParser):
    """Splits text into paragraphs on blank lines.

    ``content`` keeps the original text verbatim; section offsets index the
    reconstructed paragraph text instead.
    """

    file_type = "txt"
    extensions = (".txt",)
    mime_types = ("text/plain",)

    def extract(self, file: InputFile) -> ParsedDocument:
        text = file.read_text()
        builder = SectionBuilder()
        for paragraph in _BLANK_LINE.split(text):
            builder.add(paragraph)

        metadata = DocumentMetadata(
            word_count=count_words(text),
            character_count=len(text),
        )
        return builder.build(file, FileType.TXT, content=text, metadata=metadata)
