"""Rich document parsers: Word, HTML and Markdown.

Structural elements map to section types by role: headings → heading,
lists → list, tables → table, everything else → paragraph.
"""

from __future__ import annotations
import io
import logging
import re
from typing import Iterator

import lxml.html
from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from ..types import DocumentMetadata, FileType, InputFile, ParsedDocument, SectionType
from .base import DocumentParser, SectionBuilder

logger = logging.getLogger(__name__)

ROW_SEPARATOR = "\n"
CELL_SEPARATOR = "\t"


def _collapse(text: str) -> str:
    return " ".join(text.split())


# ── Word ─────────────────────────────────────────────────────────────

def _is_heading(paragraph: Paragraph) -> bool:
    name = getattr(paragraph.style, "name", "") or ""
    return name.startswith("Heading") or name == "Title"


def _is_list_item(paragraph: Paragraph) -> bool:
    name = getattr(paragraph.style, "name", "") or ""
    if name.startswith("List"):
        return True
    ppr = paragraph._p.pPr
    return ppr is not None and ppr.numPr is not None


def _table_text(table: Table) -> str:
    rows = []
    for row in table.rows:
        rows.append(CELL_SEPARATOR.join(cell.text.strip() for cell in row.cells))
    return ROW_SEPARATOR.join(rows)


class DOCXParser(DocumentParser):
    file_type = "docx"
    extensions = (".docx", ".doc")
    mime_types = (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
    )

    def extract(self, file: InputFile) -> ParsedDocument:
        document = Document(io.BytesIO(file.read_bytes()))
        builder = SectionBuilder()
        list_items: list[str] = []

        def flush_list() -> None:
            if list_items:
                builder.add(ROW_SEPARATOR.join(list_items), SectionType.LIST)
                list_items.clear()

        for child in document.element.body.iterchildren():
            if child.tag == qn("w:p"):
                paragraph = Paragraph(child, document)
                if _is_list_item(paragraph):
                    if paragraph.text.strip():
                        list_items.append(paragraph.text.strip())
                    continue
                flush_list()
                kind = SectionType.HEADING if _is_heading(paragraph) else SectionType.PARAGRAPH
                builder.add(paragraph.text, kind)
            elif child.tag == qn("w:tbl"):
                flush_list()
                builder.add(_table_text(Table(child, document)), SectionType.TABLE)
        flush_list()

        metadata = DocumentMetadata()
        try:
            props = document.core_properties
            metadata.title = props.title or None
            metadata.author = props.author or None
            metadata.created_at = props.created.isoformat() if props.created else None
            metadata.modified_at = props.modified.isoformat() if props.modified else None
        except Exception as e:
            logger.warning("Failed to read DOCX metadata for %s: %s", file.name, e)

        return builder.build(file, FileType.DOCX, metadata=metadata)


# ── HTML ─────────────────────────────────────────────────────────────

_HTML_ROLES = {
    "p": SectionType.PARAGRAPH,
    "h1": SectionType.HEADING,
    "h2": SectionType.HEADING,
    "h3": SectionType.HEADING,
    "h4": SectionType.HEADING,
    "h5": SectionType.HEADING,
    "h6": SectionType.HEADING,
    "ul": SectionType.LIST,
    "ol": SectionType.LIST,
    "table": SectionType.TABLE,
}


# XML declaration encoding or <meta charset>
_DECLARED_CHARSET = re.compile(rb"""(?:encoding|charset)\s*=\s*["']?([A-Za-z0-9._\-]+)""", re.IGNORECASE)


def _html_blocks(root: lxml.html.HtmlElement) -> Iterator[tuple[SectionType, str]]:
    tags = tuple(_HTML_ROLES)
    for element in root.iter(*tags):
        # Outermost block wins; nested blocks are already in its text.
        if next(element.iterancestors(*tags), None) is not None:
            continue
        role = _HTML_ROLES[element.tag]
        if role is SectionType.LIST:
            items = [_collapse(li.text_content()) for li in element.xpath("./li")]
            text = ROW_SEPARATOR.join(item for item in items if item)
        elif role is SectionType.TABLE:
            text = ROW_SEPARATOR.join(
                CELL_SEPARATOR.join(_collapse(cell.text_content()) for cell in row.xpath("./td|./th"))
                for row in element.xpath(".//tr")
            )
        else:
            text = _collapse(element.text_content())
        yield role, text


class HTMLParser(DocumentParser):
    file_type = "html"
    extensions = (".html", ".htm")
    mime_types = ("text/html",)

    def extract(self, file: InputFile) -> ParsedDocument:
        data = file.read_bytes()
        if not data.strip():
            return SectionBuilder().build(file, FileType.HTML)

        # Bytes, so an XHTML encoding declaration is accepted; undeclared is UTF-8.
        declared = _DECLARED_CHARSET.search(data[:1024])
        encoding = declared.group(1).decode("ascii") if declared else "utf-8"
        root = lxml.html.document_fromstring(data, parser=lxml.html.HTMLParser(encoding=encoding))
        for junk in root.xpath("//script|//style"):
            junk.drop_tree()

        builder = SectionBuilder()
        for role, text in _html_blocks(root):
            builder.add(text, role)

        if not builder.sections:
            body = root.find("body")
            builder.add(_collapse((body if body is not None else root).text_content()))

        metadata = DocumentMetadata()
        try:
            title = _collapse(root.findtext(".//title") or "")
            if title:
                metadata.title = title
            authors = root.xpath("//meta[@name='author']/@content")
            if authors and str(authors[0]).strip():
                metadata.author = str(authors[0]).strip()
        except Exception as e:
            logger.warning("Failed to read HTML metadata for %s: %s", file.name, e)

        return builder.build(file, FileType.HTML, metadata=metadata)


# ── Markdown ─────────────────────────────────────────────────────────

_MD_HEADING = re.compile(r"^ {0,3}(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_MD_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
_MD_TABLE_ROW = re.compile(r"^\s*\|")


class MarkdownParser(DocumentParser):
    file_type = "md"
    extensions = (".md", ".markdown")
    mime_types = ("text/markdown", "text/x-markdown")

    def extract(self, file: InputFile) -> ParsedDocument:
        builder = SectionBuilder()
        metadata = DocumentMetadata()
        block: list[str] = []
        block_type = SectionType.PARAGRAPH

        def flush() -> None:
            if block:
                builder.add("\n".join(block), block_type)
                block.clear()

        for line in file.read_text().splitlines():
            if not line.strip():
                flush()
                continue

            heading = _MD_HEADING.match(line)
            if heading:
                flush()
                builder.add(heading.group(2), SectionType.HEADING)
                if metadata.title is None and len(heading.group(1)) == 1:
                    metadata.title = heading.group(2).strip() or None
                continue

            if _MD_LIST_ITEM.match(line):
                kind = SectionType.LIST
            elif _MD_TABLE_ROW.match(line):
                kind = SectionType.TABLE
            elif block and block_type is SectionType.LIST and line[:1].isspace():
                kind = SectionType.LIST      # indented continuation of an item
            else:
                kind = SectionType.PARAGRAPH

            if block and kind is not block_type:
                flush()
            block_type = kind
            block.append(line)
        flush()

        return builder.build(file, FileType.MD, metadata=metadata)
