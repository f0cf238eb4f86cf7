"""Core types."""

from __future__ import annotations
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .utils import generate_id


class FileType(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"
    CSV = "csv"
    XLSX = "xlsx"
    PPTX = "pptx"
    ODT = "odt"
    ODP = "odp"
    ODS = "ods"
    HTML = "html"
    MD = "md"


class SectionType(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST = "list"
    TABLE = "table"
    IMAGE = "image"
    OTHER = "other"


class SensitiveCategory(str, Enum):
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    SSN = "ssn"
    CREDITCARD = "creditcard"
    DATE = "date"
    ORGANIZATION = "organization"
    FINANCIAL = "financial"
    MEDICAL = "medical"
    OTHER = "other"


class RedactionMethod(str, Enum):
    REPLACE = "replace"
    ASTERISKS = "asterisks"
    BLACKOUT = "blackout"


DEFAULT_REPLACEMENT = "[REDACTED]"


@dataclass(slots=True)
class DocumentMetadata:
    """Basic document metadata. Unset fields could not be extracted."""
    title: str | None = None
    author: str | None = None
    created_at: str | None = None      # ISO-like, e.g. "2023-04-28T12:00:00"
    modified_at: str | None = None
    page_count: int | None = None
    word_count: int = 0
    character_count: int = 0


@dataclass(frozen=True, slots=True)
class SectionPosition:
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class DocumentSection:
    """A contiguous, typed slice of document text.

    ``position`` indexes into the parent document's ``content`` as assembled by
    the parser. After a redaction pass the offsets are stale.
    """
    id: str
    type: SectionType
    content: str
    position: SectionPosition


@dataclass(slots=True)
class ParsedDocument:
    """Uniform result of parsing any supported format."""
    content: str
    metadata: DocumentMetadata
    sections: list[DocumentSection]
    filename: str
    file_type: FileType
    file_size: int


@dataclass(frozen=True, slots=True)
class ItemPosition:
    """One occurrence of a sensitive item, relative to a section's content."""
    section_id: str
    start: int
    end: int


@dataclass(slots=True)
class SensitiveItem:
    """A deduplicated, confidence-scored detection of a literal."""
    id: str
    text: str
    category: SensitiveCategory
    positions: list[ItemPosition] = field(default_factory=list)
    confidence: float = 0.5            # 0.0–1.0
    selected: bool = False             # caller-controlled redaction intent
    is_custom: bool = False            # user-supplied literal, no positions

    @classmethod
    def custom(
        cls,
        text: str,
        category: SensitiveCategory = SensitiveCategory.OTHER,
    ) -> "SensitiveItem":
        """A user-supplied literal, redacted by a document-wide search."""
        return cls(
            id=generate_id(),
            text=text,
            category=category,
            confidence=1.0,
            selected=True,
            is_custom=True,
        )


@dataclass
class RedactionOptions:
    """How matched literals are rewritten."""
    method: RedactionMethod | str = RedactionMethod.REPLACE
    replacement_text: str | None = DEFAULT_REPLACEMENT
    preserve_length: bool = False      # pad/truncate to the original span length
    case_sensitive: bool = False
    whole_word: bool = True


@dataclass(frozen=True, slots=True)
class InputFile:
    """An in-memory file handed to a parser."""
    name: str
    data: bytes
    mime_type: str = ""

    @classmethod
    def from_path(cls, path: str | Path) -> "InputFile":
        path = Path(path).expanduser()
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, data=path.read_bytes(), mime_type=mime_type or "")

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Lower-cased extension including the dot, or '' when there is none."""
        return Path(self.name).suffix.lower()

    def read_bytes(self) -> bytes:
        return self.data

    def read_text(self) -> str:
        return self.data.decode("utf-8-sig", errors="replace")
