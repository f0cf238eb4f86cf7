"""PDF parser built on PyMuPDF.

Text spans are read page by page. A vertical jump of more than
``PARAGRAPH_GAP`` units between consecutive spans starts a new paragraph.
"""

from __future__ import annotations
import logging
from typing import Iterator

import fitz  # PyMuPDF

from ..types import DocumentMetadata, FileType, InputFile, ParsedDocument
from .base import DocumentParser, SectionBuilder

logger = logging.getLogger(__name__)

PARAGRAPH_GAP = 10


def parse_pdf_date(value: str | None) -> str | None:
    """``D:20230428120000Z`` → ``2023-04-28T12:00:00``.

    Strings that are not in PDF date form are returned unchanged.
    """
    if not value:
        return None
    if not value.startswith("D:"):
        return value

    raw = value[2:]
    if len(raw) < 8 or not raw[:8].isdigit():
        return value
    date = f"{raw[0:4]}-{raw[4:6]}-{raw[6:8]}"
    if len(raw) >= 14 and raw[8:14].isdigit():
        return f"{date}T{raw[8:10]}:{raw[10:12]}:{raw[12:14]}"
    return date


def _text_runs(page: fitz.Page) -> Iterator[tuple[str, float]]:
    """Yield (text, baseline y) for every text span on the page."""
    for block in page.get_text("dict")["blocks"]:
        if block.get("type", 0) != 0:
            continue  # image block
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                yield span["text"], span["origin"][1]


class PDFParser(DocumentParser):
    file_type = "pdf"
    extensions = (".pdf",)
    mime_types = ("application/pdf",)

    def extract(self, file: InputFile) -> ParsedDocument:
        builder = SectionBuilder()
        metadata = DocumentMetadata()

        with fitz.open(stream=file.read_bytes(), filetype="pdf") as pdf:
            metadata.page_count = pdf.page_count
            for number, page in enumerate(pdf, start=1):
                logger.debug("Processing page %d of %d", number, pdf.page_count)
                paragraph = ""
                last_y: float | None = None
                for text, y in _text_runs(page):
                    if last_y is not None and abs(y - last_y) > PARAGRAPH_GAP:
                        builder.add(paragraph)
                        paragraph = text
                    else:
                        if paragraph and not paragraph.endswith(" "):
                            paragraph += " "
                        paragraph += text
                    last_y = y
                builder.add(paragraph)

            try:
                info = pdf.metadata or {}
                metadata.title = info.get("title") or None
                metadata.author = info.get("author") or None
                metadata.created_at = parse_pdf_date(info.get("creationDate"))
                metadata.modified_at = parse_pdf_date(info.get("modDate"))
            except Exception as e:
                logger.warning("Failed to read PDF metadata for %s: %s", file.name, e)

        return builder.build(file, FileType.PDF, metadata=metadata)
