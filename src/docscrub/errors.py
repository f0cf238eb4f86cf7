"""Error taxonomy.

Detection and redaction never raise on well-formed input; only the parse
stage fails, and it fails with one of these.
"""

from __future__ import annotations


class DocScrubError(Exception):
    """Base class for docscrub errors."""


class ParseError(DocScrubError):
    """A file could not be read or its structure could not be extracted."""

    def __init__(self, filename: str, cause: BaseException | str) -> None:
        self.filename = filename
        self.cause = cause
        super().__init__(f"Failed to parse {filename}: {cause}")


class UnsupportedFormatError(DocScrubError):
    """No registered parser claims the file."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Unsupported file format: {filename}")
