"""Generic office-container parser.

OOXML (docx, pptx, xlsx) and OpenDocument (odt, odp, ods) files are zip
archives of XML parts. This parser reads the main parts directly with lxml and
walks them in document order. It is the fallback: register it after the
specialized parsers so they take precedence for the extensions they share.
"""

from __future__ import annotations
import io
import logging
import re
import zipfile
from pathlib import Path
from typing import Iterator

from lxml import etree

from ..types import DocumentMetadata, FileType, InputFile, ParsedDocument, SectionType
from .base import DocumentParser, SectionBuilder

logger = logging.getLogger(__name__)

W = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
A = "http://schemas.openxmlformats.org/drawingml/2006/main"
SML = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
TEXT = "urn:oasis:names:tc:opendocument:xmlns:text:1.0"
TABLE = "urn:oasis:names:tc:opendocument:xmlns:table:1.0"
DRAW = "urn:oasis:names:tc:opendocument:xmlns:drawing:1.0"
META = "urn:oasis:names:tc:opendocument:xmlns:meta:1.0"
DC = "http://purl.org/dc/elements/1.1/"
DCTERMS = "http://purl.org/dc/terms/"

_ROLES = {
    f"{{{TEXT}}}h": SectionType.HEADING,
    f"{{{TEXT}}}list": SectionType.LIST,
    f"{{{TABLE}}}table-row": SectionType.TABLE,
    f"{{{W}}}tr": SectionType.TABLE,
    f"{{{A}}}tr": SectionType.TABLE,
    f"{{{TEXT}}}p": SectionType.PARAGRAPH,
    f"{{{W}}}p": SectionType.PARAGRAPH,
    f"{{{A}}}p": SectionType.PARAGRAPH,
}
_INLINE_CONTAINERS = {f"{{{TEXT}}}{name}" for name in ("p", "h", "span", "a")}
_SKIPPED = {f"{{{W}}}delText", f"{{{W}}}instrText"}
_CELLS = {f"{{{W}}}tc", f"{{{A}}}tc", f"{{{TABLE}}}table-cell"}
_SLIDE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
_SHEET = re.compile(r"^xl/worksheets/sheet(\d+)\.xml$")


def _xml(archive: zipfile.ZipFile, name: str) -> etree._Element:
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.fromstring(archive.read(name), parser)


def _collect(element: etree._Element, parts: list[str]) -> None:
    tag = element.tag
    if not isinstance(tag, str) or tag in _SKIPPED:
        return
    local = etree.QName(tag).localname
    if local == "tab":
        parts.append("\t")
    elif local in ("br", "cr", "line-break"):
        parts.append("\n")
    elif tag == f"{{{TEXT}}}s":
        parts.append(" " * int(element.get(f"{{{TEXT}}}c", "1")))
    else:
        # OOXML keeps text in <t> leaves; ODF uses mixed content.
        if element.text and (local == "t" or tag in _INLINE_CONTAINERS):
            parts.append(element.text)
        for child in element:
            _collect(child, parts)
            if child.tail and tag in _INLINE_CONTAINERS:
                parts.append(child.tail)
        if local in ("p", "h"):
            parts.append("\n")


def inline_text(element: etree._Element) -> str:
    parts: list[str] = []
    _collect(element, parts)
    return "".join(parts)


def _block_text(element: etree._Element, role: SectionType) -> str:
    if role is SectionType.TABLE:
        cells = [child for child in element if child.tag in _CELLS]
        return "\t".join(" ".join(inline_text(cell).split()) for cell in cells)
    lines = (line.strip() for line in inline_text(element).splitlines())
    return "\n".join(line for line in lines if line)


def _word_style(paragraph: etree._Element) -> str:
    style = paragraph.find(f"{{{W}}}pPr/{{{W}}}pStyle")
    return style.get(f"{{{W}}}val", "") if style is not None else ""


def walk(element: etree._Element) -> Iterator[tuple[SectionType, str]]:
    """Yield (section type, text) for structural blocks in document order."""
    for child in element:
        role = _ROLES.get(child.tag) if isinstance(child.tag, str) else None
        if role is None:
            yield from walk(child)
            continue
        if child.tag == f"{{{W}}}p" and _word_style(child).startswith(("Heading", "Title")):
            role = SectionType.HEADING
        yield role, _block_text(child, role)


def _numbered(archive: zipfile.ZipFile, pattern: re.Pattern) -> list[str]:
    found = [(int(m.group(1)), name) for name in archive.namelist() if (m := pattern.match(name))]
    return [name for _, name in sorted(found)]


class OfficeParser(DocumentParser):
    file_type = "office"
    extensions = (".docx", ".pptx", ".xlsx", ".odt", ".odp", ".ods")

    def extract(self, file: InputFile) -> ParsedDocument:
        file_type = FileType(file.extension.lstrip("."))
        builder = SectionBuilder()
        metadata = DocumentMetadata()

        with zipfile.ZipFile(io.BytesIO(file.read_bytes())) as archive:
            if file_type is FileType.DOCX:
                self._add_blocks(builder, _xml(archive, "word/document.xml"))
            elif file_type is FileType.PPTX:
                slides = _numbered(archive, _SLIDE)
                for name in slides:
                    self._add_blocks(builder, _xml(archive, name))
                metadata.page_count = len(slides)
            elif file_type is FileType.XLSX:
                metadata.page_count = self._add_workbook(builder, archive)
            else:
                content = _xml(archive, "content.xml")
                self._add_blocks(builder, content)
                if file_type is FileType.ODP:
                    metadata.page_count = len(content.findall(f".//{{{DRAW}}}page"))

            try:
                self._read_metadata(archive, metadata)
            except Exception as e:
                logger.warning("Failed to read office metadata for %s: %s", file.name, e)

        return builder.build(file, file_type, metadata=metadata)

    @staticmethod
    def _add_blocks(builder: SectionBuilder, root: etree._Element) -> None:
        for role, text in walk(root):
            builder.add(text, role)

    @staticmethod
    def _add_workbook(builder: SectionBuilder, archive: zipfile.ZipFile) -> int:
        shared: list[str] = []
        if "xl/sharedStrings.xml" in archive.namelist():
            shared = [inline_text(si) for si in _xml(archive, "xl/sharedStrings.xml").iter(f"{{{SML}}}si")]

        workbook = _xml(archive, "xl/workbook.xml")
        names = [sheet.get("name", "") for sheet in workbook.iter(f"{{{SML}}}sheet")]
        sheets = _numbered(archive, _SHEET)

        for index, part in enumerate(sheets):
            rows = []
            for row in _xml(archive, part).iter(f"{{{SML}}}row"):
                cells = []
                for cell in row.iter(f"{{{SML}}}c"):
                    kind = cell.get("t")
                    if kind == "s":
                        cells.append(shared[int(cell.findtext(f"{{{SML}}}v"))])
                    elif kind == "inlineStr":
                        inline = cell.find(f"{{{SML}}}is")
                        cells.append(inline_text(inline) if inline is not None else "")
                    else:
                        cells.append(cell.findtext(f"{{{SML}}}v") or "")
                if any(c.strip() for c in cells):
                    rows.append("\t".join(cells))
            if not rows:
                continue
            name = names[index] if index < len(names) else Path(part).stem
            builder.add(f"Sheet: {name}", SectionType.HEADING)
            for text in rows:
                builder.add(text, SectionType.TABLE)
        return len(sheets)

    @staticmethod
    def _read_metadata(archive: zipfile.ZipFile, metadata: DocumentMetadata) -> None:
        names = archive.namelist()
        if "docProps/core.xml" in names:
            core = _xml(archive, "docProps/core.xml")
            fields = {
                "title": f"{{{DC}}}title",
                "author": f"{{{DC}}}creator",
                "created_at": f"{{{DCTERMS}}}created",
                "modified_at": f"{{{DCTERMS}}}modified",
            }
        elif "meta.xml" in names:
            core = _xml(archive, "meta.xml")
            fields = {
                "title": f".//{{{DC}}}title",
                "author": f".//{{{META}}}initial-creator",
                "created_at": f".//{{{META}}}creation-date",
                "modified_at": f".//{{{DC}}}date",
            }
        else:
            return

        for attr, path in fields.items():
            value = (core.findtext(path) or "").strip()
            if value:
                setattr(metadata, attr, value)
        if metadata.author is None and "meta.xml" in names:
            metadata.author = (core.findtext(f".//{{{DC}}}creator") or "").strip() or None
