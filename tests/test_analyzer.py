"""Tests for the regex battery and the sensitive-data analyzer."""

import os
import re
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from docscrub import (
    AnalyzerConfig,
    InputFile,
    SensitiveCategory,
    SensitiveDataAnalyzer,
)
from docscrub.parsers import TXTParser
from docscrub.patterns import PatternMatch, contains_common_word, scan_organizations, scan_patterns, score

EXAMPLE = "Contact John Smith at john.smith@example.com or 555-123-4567."


def _doc(*paragraphs: str):
    text = "\n\n".join(paragraphs)
    return TXTParser().parse(InputFile("t.txt", text.encode("utf-8")))


def _by_text(items):
    return {item.text: item for item in items}


# ── Regex battery ────────────────────────────────────────────────────

def test_scan_email_phone_name():
    found = {(m.category, m.text) for m in scan_patterns(EXAMPLE)}
    assert (SensitiveCategory.EMAIL, "john.smith@example.com") in found
    assert (SensitiveCategory.PHONE, "555-123-4567") in found
    assert (SensitiveCategory.NAME, "John Smith") in found


def test_scan_offsets_slice_text():
    for m in scan_patterns(EXAMPLE):
        assert EXAMPLE[m.start:m.end] == m.text


def test_scan_ssn_and_card():
    found = {(m.category, m.text) for m in scan_patterns("SSN 123-45-6789, card 4111 1111 1111 1111")}
    assert (SensitiveCategory.SSN, "123-45-6789") in found
    assert (SensitiveCategory.CREDITCARD, "4111 1111 1111 1111") in found


def test_scan_date_and_address():
    found = {(m.category, m.text) for m in scan_patterns("Born 12/05/1990, ship to 221 Baker Street today")}
    assert (SensitiveCategory.DATE, "12/05/1990") in found
    assert (SensitiveCategory.ADDRESS, "221 Baker Street") in found


def test_scan_nothing():
    assert scan_patterns("nothing to see here at all") == []


def test_scores():
    assert score("a@b.com", SensitiveCategory.EMAIL) == 0.95
    assert score("ab", SensitiveCategory.EMAIL) == 0.5
    assert score("555-123-4567", SensitiveCategory.PHONE) == 0.9
    assert score("123-4567", SensitiveCategory.PHONE) == 0.7
    assert score("123456789", SensitiveCategory.SSN) == 0.95
    assert score("3782 822463 10005", SensitiveCategory.CREDITCARD) == 0.9
    assert score("1234", SensitiveCategory.CREDITCARD) == 0.6
    assert score("Jane Doe", SensitiveCategory.NAME) == 0.7
    assert score("Jane", SensitiveCategory.NAME) == 0.5
    assert score("221 Baker Street", SensitiveCategory.ADDRESS) == 0.8
    assert score("1 Elm St", SensitiveCategory.ADDRESS) == 0.6
    assert score("1/2/99", SensitiveCategory.DATE) == 0.7
    assert score("Acme Holdings", SensitiveCategory.ORGANIZATION) == 0.6
    assert score("whatever", SensitiveCategory.OTHER) == 0.5


def test_common_words_match_whole_tokens():
    assert contains_common_word("The Company")
    assert not contains_common_word("Theodore Smith")


# ── Analyzer ─────────────────────────────────────────────────────────

def test_analyze_example():
    items = SensitiveDataAnalyzer().analyze(_doc(EXAMPLE))
    by_text = _by_text(items)

    assert by_text["John Smith"].category is SensitiveCategory.NAME
    assert by_text["John Smith"].confidence == 0.7
    assert by_text["john.smith@example.com"].category is SensitiveCategory.EMAIL
    assert by_text["john.smith@example.com"].confidence == 0.95
    assert by_text["555-123-4567"].category is SensitiveCategory.PHONE
    assert by_text["555-123-4567"].confidence == 0.9


def test_analyze_sorted_by_confidence():
    items = SensitiveDataAnalyzer().analyze(_doc(EXAMPLE))
    confidences = [i.confidence for i in items]
    assert confidences == sorted(confidences, reverse=True)
    assert items[0].text == "john.smith@example.com"
    assert all(0.0 <= c <= 1.0 for c in confidences)


def test_analyze_preselects_above_threshold():
    by_text = _by_text(SensitiveDataAnalyzer().analyze(_doc(EXAMPLE)))
    assert by_text["john.smith@example.com"].selected
    assert by_text["555-123-4567"].selected
    assert not by_text["John Smith"].selected  # 0.7 is not above 0.7


def test_analyze_custom_threshold():
    analyzer = SensitiveDataAnalyzer(AnalyzerConfig(preselect_threshold=0.5))
    assert all(i.selected for i in analyzer.analyze(_doc(EXAMPLE)))


def test_analyze_texts_unique():
    items = SensitiveDataAnalyzer().analyze(_doc(EXAMPLE, EXAMPLE, "Call 555-123-4567 again"))
    texts = [i.text for i in items]
    assert len(texts) == len(set(texts))


def test_analyze_merges_across_sections():
    doc = _doc("Email alice@example.com now.", "Again alice@example.com here.")
    items = SensitiveDataAnalyzer().analyze(doc)
    email = _by_text(items)["alice@example.com"]

    assert len(email.positions) == 2
    assert {p.section_id for p in email.positions} == {s.id for s in doc.sections}
    contents = {s.id: s.content for s in doc.sections}
    for p in email.positions:
        assert contents[p.section_id][p.start:p.end] == "alice@example.com"


def test_analyze_empty_document():
    assert SensitiveDataAnalyzer().analyze(_doc("nothing to see here at all")) == []
    assert SensitiveDataAnalyzer().analyze(_doc("")) == []


def test_common_word_filtering_toggle():
    doc = _doc("Report filed by The Company yesterday.")
    analyzer = SensitiveDataAnalyzer()

    by_text = _by_text(analyzer.analyze(doc))
    assert by_text["The Company"].category is SensitiveCategory.ORGANIZATION

    analyzer.set_use_common_word_filtering(False)
    by_text = _by_text(analyzer.analyze(doc))
    assert by_text["The Company"].category is SensitiveCategory.NAME


def test_organizations():
    by_text = _by_text(SensitiveDataAnalyzer().analyze(_doc("Invoice sent to Jane Doe Consulting.")))
    org = by_text["Jane Doe Consulting"]
    assert org.category is SensitiveCategory.ORGANIZATION
    assert org.confidence == 0.6
    # Overlapping detections in other categories are kept separately
    assert by_text["Jane Doe"].category is SensitiveCategory.NAME


def test_short_organizations_ignored():
    items = SensitiveDataAnalyzer().analyze(_doc("Ann Lee"))
    assert [(i.category, i.text) for i in items] == [(SensitiveCategory.NAME, "Ann Lee")]


def test_categories_filter():
    analyzer = SensitiveDataAnalyzer(AnalyzerConfig(categories={SensitiveCategory.EMAIL}))
    items = analyzer.analyze(_doc(EXAMPLE))
    assert [i.text for i in items] == ["john.smith@example.com"]


def test_allow_list():
    analyzer = SensitiveDataAnalyzer(AnalyzerConfig(allow_list={"john.smith@example.com"}))
    texts = {i.text for i in analyzer.analyze(_doc(EXAMPLE))}
    assert "john.smith@example.com" not in texts
    assert "555-123-4567" in texts


def test_custom_scanner():
    def medical_records(text):
        return [
            PatternMatch(SensitiveCategory.MEDICAL, m.start(), m.end(), m.group())
            for m in re.finditer(r"MRN-\d+", text)
        ]

    analyzer = SensitiveDataAnalyzer(AnalyzerConfig(custom_scanners=[medical_records]))
    item = _by_text(analyzer.analyze(_doc("patient record MRN-00123 filed")))["MRN-00123"]
    assert item.category is SensitiveCategory.MEDICAL
    assert item.confidence == 0.5
    assert not item.selected


def test_phone_not_inside_longer_token():
    found = [(m.text, m.start) for m in scan_patterns("Ref A1555-123-4567 and 555-123-4567")]
    assert found == [("555-123-4567", 23)]
    assert scan_patterns("order 15551234567890") == []


def test_organization_identical_to_name_is_dropped():
    assert scan_organizations("Jonathan Whitfield", {"Jonathan Whitfield"}) == []
    assert [m.text for m in scan_organizations("Jonathan Whitfield")] == ["Jonathan Whitfield"]

    items = SensitiveDataAnalyzer().analyze(_doc("Signed by Jonathan Whitfield."))
    assert [(i.category, i.text) for i in items] == [(SensitiveCategory.NAME, "Jonathan Whitfield")]


def test_repeated_name_stays_a_name():
    doc = _doc("Jonathan Whitfield", "Jonathan Whitfield joined.")
    items = SensitiveDataAnalyzer().analyze(doc)
    assert [(i.category, i.text) for i in items] == [(SensitiveCategory.NAME, "Jonathan Whitfield")]
    assert len(items[0].positions) == 2


def test_equal_confidence_keeps_document_order():
    doc = _doc("Zed Young wrote first.", "Amy Adams replied at amy@example.com.", "Bob Clark agreed.")
    items = SensitiveDataAnalyzer().analyze(doc)
    assert [i.text for i in items] == ["amy@example.com", "Zed Young", "Amy Adams", "Bob Clark"]


def test_analyzers_do_not_share_config():
    config = AnalyzerConfig()
    first = SensitiveDataAnalyzer(config)
    second = SensitiveDataAnalyzer(config)

    first.set_use_common_word_filtering(False)
    assert second.config.use_common_word_filtering
    assert config.use_common_word_filtering
