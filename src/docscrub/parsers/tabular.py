"""Delimited table parsers: CSV and Excel workbooks.

Each row becomes one section. Workbooks introduce every sheet with a
``Sheet: <name>`` heading section.
"""

from __future__ import annotations
import csv
import io
import logging
from datetime import date, datetime
from typing import Any

from openpyxl import load_workbook

from ..types import DocumentMetadata, FileType, InputFile, ParsedDocument, SectionType
from .base import DocumentParser, SectionBuilder

logger = logging.getLogger(__name__)

CSV_CELL_SEPARATOR = ", "
SHEET_CELL_SEPARATOR = "\t"


def parse_csv_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one CSV line, honouring quoted fields and ``""`` escapes."""
    return next(csv.reader([line], delimiter=delimiter), [])


class CSVParser(DocumentParser):
    file_type = "csv"
    extensions = (".csv",)
    mime_types = ("text/csv",)

    def extract(self, file: InputFile) -> ParsedDocument:
        text = file.read_text()
        lines = [line for line in text.splitlines() if line.strip()]

        builder = SectionBuilder()
        # The first line is the header; it gets no heading section of its own.
        for line in lines:
            builder.add(CSV_CELL_SEPARATOR.join(parse_csv_line(line)))

        metadata = DocumentMetadata(character_count=len(text))
        return builder.build(file, FileType.CSV, metadata=metadata)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class XLSXParser(DocumentParser):
    file_type = "xlsx"
    extensions = (".xlsx", ".xls")
    mime_types = (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
    )

    def extract(self, file: InputFile) -> ParsedDocument:
        workbook = load_workbook(io.BytesIO(file.read_bytes()), read_only=True, data_only=True)
        builder = SectionBuilder()
        try:
            sheet_names = list(workbook.sheetnames)
            for name in sheet_names:
                rows = [
                    row for row in workbook[name].iter_rows(values_only=True)
                    if any(cell is not None and str(cell).strip() for cell in row)
                ]
                if not rows:
                    logger.debug("Skipping empty sheet %r in %s", name, file.name)
                    continue

                builder.add(f"Sheet: {name}", SectionType.HEADING)
                for row in rows:
                    builder.add(SHEET_CELL_SEPARATOR.join(_cell_text(cell) for cell in row))
        finally:
            workbook.close()

        metadata = DocumentMetadata(page_count=len(sheet_names))
        return builder.build(file, FileType.XLSX, metadata=metadata)
