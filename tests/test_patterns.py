"""
Tests for the bilingual keyword table and line predicates.
"""

import re

import pytest

from cardscan import patterns
from cardscan.patterns import (
    find_title_anchor,
    has_name_stopword,
    is_address_line,
    is_company_line,
    is_contact_label,
    is_person_ish,
    is_title_line,
    strip_contact_labels,
)


class TestKeywordTable:
    """The compiled regexes are derived from KEYWORDS alone."""

    def test_every_category_compiles(self):
        for category in patterns.KEYWORDS:
            assert isinstance(patterns._compile(category), re.Pattern)

    def test_extending_table_extends_predicate(self, monkeypatch):
        assert not is_title_line("Sommelier")

        keywords = {k: {"words": list(v["words"]), "stems": list(v["stems"])}
                    for k, v in patterns.KEYWORDS.items()}
        keywords["title"]["words"].append("sommelier")
        monkeypatch.setattr(patterns, "KEYWORDS", keywords)
        monkeypatch.setattr(patterns, "TITLE_RE", patterns._compile("title"))

        assert is_title_line("Sommelier")


class TestTitleLines:

    @pytest.mark.parametrize("text", [
        "Senior Engineer",
        "Chief Executive Officer",
        "Sales",
        "Counsellor for Political Affairs",
        "Генеральный директор",
        "Первый секретарь",
    ])
    def test_titles(self, text):
        assert is_title_line(text)

    @pytest.mark.parametrize("text", [
        "John Smith",
        "Acme Corp",
        "Acme Sales Inc.",
        "",
    ])
    def test_not_titles(self, text):
        assert not is_title_line(text)


class TestCompanyLines:

    @pytest.mark.parametrize("text", [
        "Acme Corp",
        "Globex Corporation",
        "Embassy of Japan",
        "ООО «Ромашка»",
        "Посольство Российской Федерации",
    ])
    def test_companies(self, text):
        assert is_company_line(text)

    def test_not_company(self):
        assert not is_company_line("John Smith")
        assert not is_company_line("Senior Engineer")


class TestAddressLines:

    @pytest.mark.parametrize("text", [
        "123 Main Street",
        "Suite 400",
        "ул. Тверская, д. 7",
        "Moscow, Russia",
    ])
    def test_addresses(self, text):
        assert is_address_line(text)

    @pytest.mark.parametrize("text", [
        "John Smith",
        "John Smith, CEO",
        "Acme, Inc",
        "Senior Engineer",
    ])
    def test_not_addresses(self, text):
        assert not is_address_line(text)


class TestNameHelpers:

    def test_stopwords(self):
        assert has_name_stopword("Second Secretary")
        assert has_name_stopword("Embassy Office")
        assert not has_name_stopword("John Smith")

    def test_person_ish(self):
        assert is_person_ish("Jane Doe")
        assert is_person_ish("Dr. Jane Doe")
        assert not is_person_ish("ACME CORP")
        assert not is_person_ish("Jane")


class TestContactLabels:

    @pytest.mark.parametrize("text", ["Tel:", "Tel. / Fax:", "E-mail:", "Тел.:", "Web"])
    def test_label_only_lines(self, text):
        assert is_contact_label(text)

    def test_not_label_only(self):
        assert not is_contact_label("Web Designer")
        assert not is_contact_label("")

    def test_strip_labels(self):
        assert strip_contact_labels("Tel: +1 555 0100") == "+1 555 0100"
        assert strip_contact_labels("Mob.: 8 800 555") == "8 800 555"
        assert strip_contact_labels("Web Designer") == "Web Designer"


class TestTitleAnchor:

    def test_anchor_offset(self):
        assert find_title_anchor("Mr. John Senior Sales Manager") == 9

    def test_anchor_at_start(self):
        assert find_title_anchor("Senior Engineer") == 0

    def test_no_anchor(self):
        assert find_title_anchor("John Smith") is None
