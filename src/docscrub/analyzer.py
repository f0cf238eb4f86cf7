"""Sensitive-data analyzer — finds candidate spans and groups them into items.

Usage:
    from docscrub import SensitiveDataAnalyzer

    analyzer = SensitiveDataAnalyzer()
    items = analyzer.analyze(document)       # highest confidence first
    for item in items:
        print(item.category, item.text, item.confidence, len(item.positions))
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from .patterns import PatternMatch, contains_common_word, scan_organizations, scan_patterns, score
from .types import ItemPosition, ParsedDocument, SensitiveCategory, SensitiveItem
from .utils import generate_id

logger = logging.getLogger(__name__)


@dataclass
class AnalyzerConfig:
    """Configuration for the SensitiveDataAnalyzer."""
    use_common_word_filtering: bool = True   # drop names containing stoplist words
    preselect_threshold: float = 0.7         # items above this start selected
    # Categories to report (None = all)
    categories: set[SensitiveCategory] | None = None
    # Literals that should NEVER be reported
    allow_list: set[str] = field(default_factory=set)
    custom_scanners: list[Callable[[str], list[PatternMatch]]] = field(default_factory=list)


class SensitiveDataAnalyzer:
    """Pattern-based detector.

    Layer 1: Regex battery (email, phone, ssn, card, date, name, address)
    Layer 2: Organization heuristic (capitalized word runs)
    Layer 3: Custom scanners (user-provided callables)

    Detection is per section; grouping by literal text is document-wide.
    """

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        self.config = replace(config) if config is not None else AnalyzerConfig()

    def set_use_common_word_filtering(self, value: bool) -> None:
        self.config.use_common_word_filtering = value

    def analyze(self, document: ParsedDocument) -> list[SensitiveItem]:
        candidates: list[SensitiveItem] = []
        for section in document.sections:
            candidates.extend(self._scan_section(section.id, section.content, candidates))

        items = _group_by_text(candidates)
        for item in items:
            item.selected = item.confidence > self.config.preselect_threshold
        items.sort(key=lambda item: -item.confidence)

        logger.debug(
            "Analyzed %s: %d candidates, %d items", document.filename, len(candidates), len(items),
        )
        return items

    def _scan_section(
        self,
        section_id: str,
        text: str,
        previous: list[SensitiveItem],
    ) -> list[SensitiveItem]:
        # --- Layer 1: Regex battery ---
        found = self._accept(section_id, scan_patterns(text))

        # --- Layer 2: Organizations, skipping literals already reported as names ---
        names = {
            item.text for item in (*previous, *found)
            if item.category is SensitiveCategory.NAME
        }
        found.extend(self._accept(section_id, scan_organizations(text, names)))

        # --- Layer 3: Custom scanners ---
        for scanner in self.config.custom_scanners:
            found.extend(self._accept(section_id, scanner(text)))
        return found

    def _accept(self, section_id: str, matches: list[PatternMatch]) -> list[SensitiveItem]:
        """Filter raw matches and turn the survivors into single-position items."""
        items: list[SensitiveItem] = []
        for m in matches:
            if not m.text or m.end <= m.start:
                continue
            if self.config.categories is not None and m.category not in self.config.categories:
                continue
            if m.text in self.config.allow_list:
                continue
            if (
                self.config.use_common_word_filtering
                and m.category is SensitiveCategory.NAME
                and contains_common_word(m.text)
            ):
                continue
            items.append(SensitiveItem(
                id=generate_id(),
                text=m.text,
                category=m.category,
                positions=[ItemPosition(section_id=section_id, start=m.start, end=m.end)],
                confidence=score(m.text, m.category),
            ))
        return items


def _group_by_text(candidates: list[SensitiveItem]) -> list[SensitiveItem]:
    """Merge candidates with identical text: positions unioned, confidence max.

    The first encounter keeps its id and category; order is first-encounter order.
    """
    grouped: dict[str, SensitiveItem] = {}
    for candidate in candidates:
        existing = grouped.get(candidate.text)
        if existing is None:
            grouped[candidate.text] = SensitiveItem(
                id=candidate.id,
                text=candidate.text,
                category=candidate.category,
                positions=list(candidate.positions),
                confidence=candidate.confidence,
            )
            continue
        existing.positions.extend(candidate.positions)
        existing.confidence = max(existing.confidence, candidate.confidence)
    return list(grouped.values())
