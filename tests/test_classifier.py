"""
Tests for field classification.

The noise thresholds exercised here encode heuristics, not ground truth;
they pin current behavior so regressions are visible.
"""

import pytest

from cardscan.classifier import FieldClassifier, Segment, is_noise_line, merge_drafts
from cardscan.models import CARD_FIELDS, ParsedCardDraft


@pytest.fixture
def classifier():
    return FieldClassifier()


class TestNoiseLines:
    """Test cases for is_noise_line."""

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        "▓▓▓|||~~~",
        "~~~ *** ~~~",
        "x" * 221,
        " ".join(["ab"] * 36),
        "a ▓▓▓▓▓▓▓▓ b",
    ])
    def test_noise(self, line):
        assert is_noise_line(line)

    @pytest.mark.parametrize("line", [
        "John Smith",
        "+1 415 555 0100",
        "123 Main Street, Springfield",
        "ООО «Ромашка»",
    ])
    def test_not_noise(self, line):
        assert not is_noise_line(line)

    def test_long_line_without_vocabulary(self):
        line = " ".join(["lorem"] * 25)
        assert len(line) > 120
        assert is_noise_line(line)

    def test_long_line_with_address_vocabulary(self):
        line = " ".join(["lorem"] * 22) + " Main Street"
        assert len(line) > 120
        assert not is_noise_line(line)


class TestMergeDrafts:

    def test_prefers_primary_values(self):
        primary = ParsedCardDraft(name="Jane Doe", title="")
        fallback = ParsedCardDraft(name="Jane", title="Product Manager", company="Globex")

        merged = merge_drafts(primary, fallback)

        assert merged.name == "Jane Doe"
        assert merged.title == "Product Manager"
        assert merged.company == "Globex"
        assert merged.email == ""


class TestLinearStrategy:
    """Test cases for FieldClassifier.classify."""

    def test_full_card(self, classifier):
        draft = classifier.classify([
            "John Smith",
            "Senior Engineer",
            "Acme Corp",
            "123 Main Street, Springfield",
        ])

        assert draft.name == "John Smith"
        assert draft.title == "Senior Engineer"
        assert draft.company == "Acme Corp"
        assert draft.address == "123 Main Street, Springfield"

    def test_decorative_line_is_dropped(self, classifier):
        draft = classifier.classify(["▓▓▓|||~~~", "John Smith", "Acme Corp"])

        assert draft.name == "John Smith"
        for name in CARD_FIELDS:
            assert "▓" not in getattr(draft, name)
            assert "~" not in getattr(draft, name)

    def test_title_trimmed_to_anchor(self, classifier):
        draft = classifier.classify(["Jane Doe", "Mr. John Senior Sales Manager"])

        assert draft.title == "Senior Sales Manager"

    def test_titles_joined(self, classifier):
        draft = classifier.classify(["Jane Doe", "Product Manager, Head of Sales"])

        assert draft.title == "Product Manager, Head of Sales"

    @pytest.mark.parametrize("title", ["Senior Vice President", "Chief Medical Officer"])
    def test_title_above_name(self, classifier, title):
        draft = classifier.classify([title, "Jane Doe", "Globex Corporation"])

        assert draft.name == "Jane Doe"
        assert draft.title == title
        assert draft.company == "Globex Corporation"

    def test_name_stopwords_rejected(self, classifier):
        draft = classifier.classify(["Second Secretary", "Embassy of Japan"])

        assert draft.name == ""
        assert draft.title == "Second Secretary"
        assert draft.company == "Embassy of Japan"

    def test_company_fallback_skips_person_names(self, classifier):
        draft = classifier.classify(["John Smith", "Jane Doe", "Globex"])

        assert draft.name == "John Smith"
        assert draft.company == "Globex"

    def test_company_prefix_stripped_from_address(self, classifier):
        segments = [
            Segment("Globex", 0, False),
            Segment("42 Elm Street", 1, True),
        ]
        company = segments[0]

        address = classifier.extract_address(segments, company)

        assert address == "42 Elm Street"

        joined = [Segment("Globex 42 Elm Street", 0, True)]
        assert classifier.extract_address(joined, Segment("Globex", 0, False)) == "42 Elm Street"

    def test_address_fallback_uses_remaining_segments(self, classifier):
        address = classifier.extract_address([Segment("Springfield", 0, False)], None)

        assert address == "Springfield"

    def test_empty_input(self, classifier):
        draft = classifier.classify([])

        assert draft == ParsedCardDraft()
        assert all(getattr(draft, name) == "" for name in CARD_FIELDS)

    def test_idempotent(self, classifier):
        lines = [
            "Ivan Petrov",
            "Генеральный директор",
            "ООО «Ромашка»",
            "ул. Тверская, д. 7",
        ]

        first = classifier.classify(lines)
        second = FieldClassifier().classify(list(lines))

        assert first == second
        assert first.name == "Ivan Petrov"
        assert first.title == "Генеральный директор"
        assert first.company == "ООО «Ромашка»"


class TestFindName:
    """Test cases for the three name strategies."""

    def test_pattern(self, classifier):
        assert classifier.find_name(["Acme Corp", "Maria Garcia Lopez"]) == "Maria Garcia Lopez"

    def test_pattern_skips_address_lines(self, classifier):
        assert classifier.find_name(["Baker Street 221", "Jane Doe"]) == "Jane Doe"

    def test_all_caps_name(self, classifier):
        assert classifier.find_name(["JOHN SMITH"]) == "JOHN SMITH"

    def test_no_name(self, classifier):
        assert classifier.find_name(["Senior Engineer", "Acme Corp"]) == ""

    @pytest.mark.parametrize("line", ["Senior Vice President", "Chief Medical Officer"])
    def test_title_is_not_cut_into_a_name(self, classifier, line):
        assert classifier.find_name([line]) == ""


class TestLayoutStrategy:
    """Test cases for FieldClassifier.classify_columns."""

    def test_person_on_right(self, classifier):
        draft = classifier.classify_columns(
            ["Globex Corporation", "42 Elm Street"],
            ["Jane Doe", "Product Manager"],
        )

        assert draft.name == "Jane Doe"
        assert draft.title == "Product Manager"
        assert draft.company == "Globex Corporation"
        assert draft.address == "42 Elm Street"

    def test_person_on_left(self, classifier):
        draft = classifier.classify_columns(
            ["Jane Doe", "Product Manager"],
            ["Globex Corporation", "42 Elm Street"],
        )

        assert draft.name == "Jane Doe"
        assert draft.company == "Globex Corporation"

    def test_no_name_in_either_column(self, classifier):
        draft = classifier.classify_columns(["Globex Corporation"], ["42 Elm Street"])

        assert draft == ParsedCardDraft()
