"""
Tests for contact-token extraction and validation.
"""

import re

import pytest

from cardscan.contacts import (
    ContactExtractor,
    ContactTokens,
    canonicalize_phone,
    normalize_email,
    normalize_website,
    phone_digits,
)

EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class TestNormalizers:
    """Test cases for the per-token normalizers."""

    @pytest.mark.parametrize("raw, expected", [
        ("john.smith@acme.com", "john.smith@acme.com"),
        ("John.Smith @ Acme . com", "john.smith@acme.com"),
        ("<foo@bar.com>", "foo@bar.com"),
        ("foo@bar.com;", "foo@bar.com"),
        ("not-an-email", ""),
        ("foo@bar", ""),
        ("", ""),
    ])
    def test_normalize_email(self, raw, expected):
        assert normalize_email(raw) == expected

    def test_phone_extension_is_dropped(self):
        """A "+1 (415) 555-0100 ext 204" line yields the number without 204."""
        phone = canonicalize_phone("+1 (415) 555-0100 ext 204")

        digits = phone_digits(phone)
        assert digits.endswith("4155550100")
        assert "204" not in digits
        assert 7 <= len(digits) <= 20

    def test_phone_keeps_russian_number(self):
        assert canonicalize_phone("+7 495 123 45 67") == "+7 495 123 45 67"

    def test_phone_trims_bleed_digits(self):
        assert canonicalize_phone("+44 20 7946 0958 12345") == "+44 20 7946 0958 123"

    def test_phone_unbalanced_parenthesis(self):
        assert canonicalize_phone("(415 555 0100") == "415 555 0100"

    @pytest.mark.parametrize("raw", ["12345", "", "123456"])
    def test_phone_too_short(self, raw):
        assert canonicalize_phone(raw) == ""

    @pytest.mark.parametrize("raw, expected", [
        ("www.acme.com", "acme.com"),
        ("https://www.Example.com/about/", "example.com/about"),
        ("example com", "example.com"),
        ("сайт.рф", "сайт.рф"),
        ("foo@bar.com", ""),
        ("localhost", ""),
        ("acme.c0m", ""),
    ])
    def test_normalize_website(self, raw, expected):
        assert normalize_website(raw) == expected


class TestContactExtractor:
    """Test cases for ContactExtractor."""

    @pytest.fixture
    def extractor(self):
        return ContactExtractor()

    def test_extractor_initialization(self, extractor):
        assert set(extractor.patterns) == {"email", "phone", "website", "spaced_website"}

    def test_malformed_email_is_ignored(self, extractor):
        tokens = extractor.extract(["foo@bar.com", "not-an-email"])

        assert tokens.emails == ["foo@bar.com"]
        assert tokens.email == "foo@bar.com"

    def test_spaced_email_line(self, extractor):
        tokens = extractor.extract(["E-mail: jane . doe @ globex . com"])

        assert tokens.email == "jane.doe@globex.com"

    def test_emails_deduplicated_case_insensitively(self, extractor):
        tokens = extractor.extract(["Foo@Bar.com", "foo@bar.com"])

        assert tokens.emails == ["foo@bar.com"]

    def test_phones_deduplicated_by_digits(self, extractor):
        tokens = extractor.extract(["+1 415 555 0100", "+1 (415) 555-0100"])

        assert tokens.phones == ["+1 415 555 0100"]

    def test_multiple_phones(self, extractor):
        tokens = extractor.extract(["Tel: +7 495 123-45-67", "Mob: +7 916 765-43-21"])

        assert len(tokens.phones) == 2
        assert tokens.phone == "+7 495 123-45-67"

    def test_phone_with_extension(self, extractor):
        tokens = extractor.extract(["+1 (415) 555-0100 ext 204"])

        assert phone_digits(tokens.phone).endswith("4155550100")
        assert "ext" not in tokens.phone

    def test_email_domain_is_not_a_website(self, extractor):
        tokens = extractor.extract(["jane@globex.com"])

        assert tokens.website == ""

    def test_website_after_email(self, extractor):
        tokens = extractor.extract(["jane@globex.com", "www.globex.com"])

        assert tokens.website == "globex.com"

    def test_spaced_website_fallback(self, extractor):
        tokens = extractor.extract(["Visit acme com"])

        assert tokens.website == "acme.com"

    def test_company_suffix_is_not_a_website(self, extractor):
        tokens = extractor.extract(["Acme Co"])

        assert tokens.website == ""

    @pytest.mark.parametrize("line", ["J.Smith", "Acme Inc.London"])
    def test_capitalized_dotted_words_are_not_websites(self, extractor, line):
        tokens = extractor.extract([line])

        assert tokens.website == ""
        assert tokens.all_tokens() == []

    def test_capitalized_host_with_common_tld(self, extractor):
        tokens = extractor.extract(["Visit Acme.com"])

        assert tokens.website == "acme.com"

    def test_no_tokens(self, extractor):
        tokens = extractor.extract(["John Smith", "Senior Engineer"])

        assert tokens == ContactTokens()

    def test_output_shapes(self, extractor):
        tokens = extractor.extract([
            "john.smith@acme.com",
            "user@@broken..com",
            "+1 415 555 0100",
            "12-34",
            "www.acme.com",
        ])

        assert all(EMAIL_SHAPE.match(e) for e in tokens.emails)
        assert all(7 <= len(phone_digits(p)) <= 20 for p in tokens.phones)
        assert "@" not in tokens.website

    def test_strip_tokens(self, extractor):
        tokens = extractor.extract(["Tel: +1 415 555 0100", "John.Smith@Acme.com", "www.acme.com"])

        assert extractor.strip_tokens("Tel: +1 415 555 0100", tokens) == "Tel:"
        assert extractor.strip_tokens("JOHN.SMITH@ACME.COM", tokens) == ""
        assert extractor.strip_tokens("Web: www.acme.com", tokens) == "Web:"
        assert extractor.strip_tokens("John Smith", tokens) == "John Smith"
