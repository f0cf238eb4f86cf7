"""Regex battery for sensitive spans, plus per-category confidence scoring.

Patterns are compiled once; compiled patterns are immutable and ``finditer``
keeps its cursor per call, so they are safe to share.

Matches from different categories are NOT deduplicated against each other:
a date inside an address is reported once per category.
"""

from __future__ import annotations
import re
from dataclasses import dataclass

from .types import SensitiveCategory

Category = SensitiveCategory


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """A single raw detection inside one piece of text."""
    category: SensitiveCategory
    start: int
    end: int
    text: str


# Each pattern: (category, compiled_regex). A pattern with a capture group
# reports that group; the name pattern uses a lookahead so overlapping pairs
# ("Contact John", "John Smith") are all found.
_PATTERNS: list[tuple[SensitiveCategory, re.Pattern]] = [
    (Category.EMAIL, re.compile(
        r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}", re.ASCII
    )),

    # Not inside a longer word or digit run
    (Category.PHONE, re.compile(
        r"(?<!\w)(?:\+\d{1,3}[\s.\-])?\(?\d{3}\)?[\s.\-]?\d{3}[\s.\-]?\d{4}(?!\w)", re.ASCII
    )),

    # National id: nine digits, optionally 3-2-4 hyphenated
    (Category.SSN, re.compile(
        r"\b\d{3}-?\d{2}-?\d{4}\b", re.ASCII
    )),

    # Card numbers: 4x4 groups, or the 15-digit 4-6-5 layout
    (Category.CREDITCARD, re.compile(
        r"\b(?:(?:\d{4}[\-\s]?){3}\d{4}|\d{4}[\-\s]?\d{6}[\-\s]?\d{5})\b", re.ASCII
    )),

    (Category.DATE, re.compile(
        r"\b\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}\b", re.ASCII
    )),

    (Category.NAME, re.compile(
        r"(?=\b([A-Z][a-z]+ [A-Z][a-z]+)\b)", re.ASCII
    )),

    (Category.ADDRESS, re.compile(
        r"\b\d+\s+[A-Za-z\s,]+\b"
        r"(?:Avenue|Lane|Road|Boulevard|Drive|Street|Ave|Dr|Rd|Blvd|Ln|St)\.?\b",
        re.ASCII | re.IGNORECASE,
    )),
]

# Two to six capitalized words in a row
_ORGANIZATION = re.compile(r"\b(?:[A-Z][a-z]+\s+){1,5}[A-Z][a-z]+\b", re.ASCII)
ORGANIZATION_MIN_LENGTH = 10

_NON_DIGIT = re.compile(r"\D", re.ASCII)

# High-frequency words that make a two-word "name" a likely false positive
COMMON_WORDS = frozenset({
    "the", "and", "that", "have", "for", "not", "with", "you", "this", "but",
    "his", "her", "she", "they", "them", "from", "will", "would", "there",
    "their", "what", "about", "which", "when", "make", "like", "time", "just",
    "know", "take", "people", "into", "year", "your", "good", "some", "could",
})


def scan_patterns(text: str) -> list[PatternMatch]:
    """Run the whole battery over text. Zero-length matches are dropped."""
    matches: list[PatternMatch] = []
    for category, pattern in _PATTERNS:
        for m in pattern.finditer(text):
            group = 1 if pattern.groups else 0
            start, end = m.span(group)
            if end <= start:
                continue
            matches.append(PatternMatch(category, start, end, m.group(group)))
    return matches


def scan_organizations(text: str, known_names: set[str] | frozenset[str] = frozenset()) -> list[PatternMatch]:
    """Capitalized multi-word runs that are not already known as names."""
    matches: list[PatternMatch] = []
    for m in _ORGANIZATION.finditer(text):
        literal = m.group().strip()
        if len(literal) < ORGANIZATION_MIN_LENGTH or len(literal.split()) < 2:
            continue
        if literal in known_names:
            continue
        start = m.start()
        matches.append(PatternMatch(Category.ORGANIZATION, start, start + len(literal), literal))
    return matches


def score(text: str, category: SensitiveCategory) -> float:
    """Confidence from the literal's shape alone."""
    if category is Category.EMAIL:
        return 0.95 if "@" in text and "." in text else 0.5
    if category is Category.PHONE:
        return 0.9 if _digit_count(text) >= 10 else 0.7
    if category is Category.SSN:
        return 0.95 if _digit_count(text) == 9 else 0.7
    if category is Category.CREDITCARD:
        return 0.9 if _digit_count(text) >= 15 else 0.6
    if category is Category.NAME:
        return 0.7 if len(text.split()) >= 2 else 0.5
    if category is Category.ADDRESS:
        return 0.8 if len(text) > 15 else 0.6
    if category is Category.DATE:
        return 0.7
    if category is Category.ORGANIZATION:
        return 0.6
    return 0.5


def contains_common_word(text: str) -> bool:
    return any(token.lower() in COMMON_WORDS for token in text.split())


def _digit_count(text: str) -> int:
    return len(_NON_DIGIT.sub("", text))
