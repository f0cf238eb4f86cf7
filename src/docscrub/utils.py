"""Small helpers shared by parsers, the analyzer and the redaction engine."""

from __future__ import annotations
import uuid


def generate_id() -> str:
    return uuid.uuid4().hex[:16]


def count_words(text: str) -> int:
    return len(text.split())


def redacted_filename(filename: str) -> str:
    """``report.pdf`` → ``redacted_report.pdf``; ``README`` → ``redacted_README``."""
    base, dot, extension = filename.rpartition(".")
    if not dot:
        return f"redacted_{filename}"
    return f"redacted_{base}.{extension}"
