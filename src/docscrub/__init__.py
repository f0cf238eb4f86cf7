"""DocScrub — find and redact sensitive text in documents."""

from .analyzer import AnalyzerConfig, SensitiveDataAnalyzer
from .config import create_scrubber, load_config, load_from_yaml
from .errors import DocScrubError, ParseError, UnsupportedFormatError
from .export import save_as_text
from .parsers import ParserRegistry, create_default_registry
from .pipeline import DocumentScrubber
from .redaction import RedactionEngine
from .types import (
    DocumentMetadata,
    DocumentSection,
    FileType,
    InputFile,
    ItemPosition,
    ParsedDocument,
    RedactionMethod,
    RedactionOptions,
    SectionPosition,
    SectionType,
    SensitiveCategory,
    SensitiveItem,
)
from .utils import redacted_filename

__all__ = [
    "SensitiveDataAnalyzer", "AnalyzerConfig",
    "RedactionEngine",
    "ParserRegistry", "create_default_registry",
    "DocumentScrubber",
    "create_scrubber", "load_config", "load_from_yaml",
    "save_as_text", "redacted_filename",
    "DocScrubError", "ParseError", "UnsupportedFormatError",
    "ParsedDocument", "DocumentSection", "DocumentMetadata", "SectionPosition",
    "SensitiveItem", "ItemPosition", "RedactionOptions", "InputFile",
    "FileType", "SectionType", "SensitiveCategory", "RedactionMethod",
]
__version__ = "0.1.0"
