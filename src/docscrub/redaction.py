"""Redaction engine — rewrites section text and rebuilds the document.

The input document is never mutated. The result carries new section objects
whose ``position`` offsets are stale: they still describe the original text
and must not be used to index the redacted ``content``.
"""

from __future__ import annotations
import logging
import re
from dataclasses import replace

from .types import (
    DEFAULT_REPLACEMENT,
    ParsedDocument,
    RedactionMethod,
    RedactionOptions,
    SensitiveItem,
)
from .utils import redacted_filename

logger = logging.getLogger(__name__)

MASK_LENGTH = 7
ASTERISK = "*"
BLOCK = "█"


def build_search_pattern(text: str, *, case_sensitive: bool, whole_word: bool) -> re.Pattern:
    """A fresh pattern for the literal ``text``.

    With ``whole_word`` a word boundary is asserted at each edge that is a word
    character; a boundary next to punctuation would never match.
    """
    pattern = re.escape(text)
    if whole_word and text:
        if text[0].isalnum() or text[0] == "_":
            pattern = rf"\b{pattern}"
        if text[-1].isalnum() or text[-1] == "_":
            pattern = rf"{pattern}\b"
    return re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)


def build_replacement(original: str, options: RedactionOptions) -> str:
    """Replacement for one matched span."""
    method = options.method
    if method == RedactionMethod.ASTERISKS:
        return ASTERISK * len(original) if options.preserve_length else ASTERISK * MASK_LENGTH
    if method == RedactionMethod.BLACKOUT:
        return BLOCK * len(original) if options.preserve_length else BLOCK * MASK_LENGTH
    if method == RedactionMethod.REPLACE and options.replacement_text:
        if options.preserve_length:
            return options.replacement_text.ljust(len(original))[:len(original)]
        return options.replacement_text
    return DEFAULT_REPLACEMENT


def redact_text(text: str, items: list[SensitiveItem], options: RedactionOptions) -> str:
    """Replace every occurrence of each item's literal in ``text``."""
    result = text
    for item in items:
        if not item.text:
            continue
        pattern = build_search_pattern(
            item.text, case_sensitive=options.case_sensitive, whole_word=options.whole_word,
        )
        result = pattern.sub(lambda m: build_replacement(m.group(), options), result)
    return result


class RedactionEngine:
    """Applies selected items to a parsed document."""

    def apply_redactions(
        self,
        document: ParsedDocument,
        items: list[SensitiveItem],
        options: RedactionOptions | None = None,
    ) -> ParsedDocument:
        """Return a redacted copy of ``document``.

        With no items the input document itself is returned.
        """
        if not items:
            return document
        options = options or RedactionOptions()

        anchored = [item for item in items if not item.is_custom]
        custom = [item for item in items if item.is_custom]

        sections = []
        for section in document.sections:
            content = section.content

            # --- Position-anchored items: only where they were detected ---
            here = [
                item for item in anchored
                if any(pos.section_id == section.id for pos in item.positions)
            ]
            if here:
                content = redact_text(content, here, options)

            # --- Custom items: everywhere ---
            if custom:
                content = redact_text(content, custom, options)

            sections.append(replace(section, content=content))

        redacted = replace(
            document,
            content="\n".join(section.content for section in sections),
            metadata=replace(document.metadata),
            sections=sections,
            filename=redacted_filename(document.filename),
        )
        logger.debug(
            "Redacted %d items (%d custom) in %s", len(items), len(custom), document.filename,
        )
        return redacted
