"""
Contact-token extraction: emails, phones and websites.

Candidates are validated and repaired here; anything that fails its shape
check is dropped silently. Every token found is later stripped from the
lines handed to the field classifier.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .normalizer import normalize_line
from .patterns import strip_contact_labels

logger = logging.getLogger(__name__)

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 20
# Longer numbers are assumed to carry recognizer bleed digits
E164_MAX_DIGITS = 15
MAX_BLEED_DIGITS = 2

EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_EMAIL_STRICT_RE = re.compile(
    r"^[a-z0-9._%+-]+@[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}$", re.IGNORECASE
)
_EXTENSION_RE = re.compile(r"[ \t]*(?:ext\.?|доб\.?|x)[ \t]*\d{1,5}$", re.IGNORECASE)
_HOST_RE = re.compile(r"^(?:[a-z0-9а-я](?:[a-z0-9а-я-]*[a-z0-9а-я])?\.)+(?:[a-z]{2,6}|рф)$")
_SPACED_TLDS = "com|net|org|info|biz|io|ru|рф"
# Hosts written with capitals and no scheme or www. must end in one of these
_COMMON_TLDS = {
    "com", "net", "org", "info", "biz", "io", "co", "ru", "uk", "de", "fr", "us",
    "eu", "ca", "au", "edu", "gov", "app", "dev", "ai", "tv",
}
_SCHEME_OR_WWW_RE = re.compile(r"^(?:https?://|www\.)", re.IGNORECASE)


def normalize_email(value: str) -> str:
    """Repair spacing/punctuation damage and validate an email candidate.

    Returns:
        The lower-cased address, or "" when it does not validate
    """
    if not value or "@" not in value:
        return ""
    candidate = re.sub(r"\s*([@.])\s*", r"\1", value.strip())
    candidate = re.sub(r"[,;]", "", candidate)
    candidate = candidate.strip(".:<>()[]'\"").lower()
    if EMAIL_SHAPE_RE.match(candidate) and _EMAIL_STRICT_RE.match(candidate):
        return candidate
    return ""


def phone_digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def phone_key(value: str) -> str:
    """Dedup key: digits with the leading + preserved."""
    stripped = (value or "").strip()
    return ("+" if stripped.startswith("+") else "") + phone_digits(stripped)


def canonicalize_phone(raw: str) -> str:
    """Trim extension and bleed digits; "" unless 7-20 digits remain."""
    candidate = _EXTENSION_RE.sub("", raw or "").strip(" \t.-")
    if candidate.startswith("(") and ")" not in candidate:
        candidate = candidate[1:]

    trimmed = 0
    while len(phone_digits(candidate)) > E164_MAX_DIGITS and trimmed < MAX_BLEED_DIGITS:
        candidate = candidate[:-1].rstrip(" \t.-(")
        trimmed += 1

    count = len(phone_digits(candidate))
    if MIN_PHONE_DIGITS <= count <= MAX_PHONE_DIGITS:
        return candidate
    return ""


def _is_plausible_host(raw: str) -> bool:
    """"acme.com", "www.Acme.io" and "Acme.com" yes; "J.Smith" and "Inc.London" no."""
    if _SCHEME_OR_WWW_RE.match(raw) or raw == raw.lower():
        return True
    host = raw.split("/", 1)[0]
    return host.rsplit(".", 1)[-1].lower() in _COMMON_TLDS


def normalize_website(value: str) -> str:
    """Lower-case, strip scheme and www., and validate the host shape."""
    if not value or "@" in value:
        return ""
    candidate = re.sub(r"\s+", ".", value.strip().lower())
    candidate = re.sub(r"^https?://", "", candidate)
    candidate = re.sub(r"^www\.", "", candidate)
    candidate = candidate.rstrip("/.,;:)")
    host, _, path = candidate.partition("/")
    if not _HOST_RE.match(host):
        return ""
    return f"{host}/{path}".rstrip("/") if path else host


@dataclass
class ContactTokens:
    """Deduplicated contact tokens found on one card."""
    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
    website: str = ""
    # Exact substrings to remove from the lines before classification
    raw: List[str] = field(default_factory=list)

    @property
    def email(self) -> str:
        return self.emails[0] if self.emails else ""

    @property
    def phone(self) -> str:
        return self.phones[0] if self.phones else ""

    def all_tokens(self) -> List[str]:
        tokens = set(t for t in self.raw if t)
        tokens.update(self.emails)
        tokens.update(self.phones)
        if self.website:
            tokens.add(self.website)
        return sorted(tokens, key=len, reverse=True)


class ContactExtractor:
    """Pulls emails, phones and a website out of normalized card lines."""

    def __init__(self):
        self.patterns = {
            "email": re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"),
            "phone": re.compile(
                r"\+?\(?\d[\d \t().-]{6,}\d(?:[ \t]*(?:ext\.?|доб\.?|x)[ \t]*\d{1,5})?",
                re.IGNORECASE,
            ),
            "website": re.compile(
                r"(?<![@\w.-])(?:https?://)?(?:www\.)?[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}(?:/[^\s]*)?",
                re.IGNORECASE,
            ),
            "spaced_website": re.compile(
                rf"(?<![@\w.-])(?:www[ \t]+)?[a-z0-9-]{{2,}}[ \t]+(?:{_SPACED_TLDS})(?!\w)",
                re.IGNORECASE,
            ),
        }

    def extract(self, lines: Sequence[str]) -> ContactTokens:
        """Extract all contact tokens from a set of normalized lines.

        Args:
            lines: Normalized card lines

        Returns:
            ContactTokens with deduplicated emails, phones and a website
        """
        text = "\n".join(lines)
        tokens = ContactTokens()

        emails, raw_emails = self.extract_emails(lines, text)
        tokens.emails = emails
        tokens.raw.extend(raw_emails)

        remainder = text
        for raw in sorted(raw_emails, key=len, reverse=True):
            remainder = re.sub(re.escape(raw), " ", remainder, flags=re.IGNORECASE)

        phones, raw_phones = self.extract_phones(remainder)
        tokens.phones = phones
        tokens.raw.extend(raw_phones)

        website, raw_website = self.extract_website(remainder)
        tokens.website = website
        if raw_website:
            tokens.raw.append(raw_website)

        logger.debug(
            f"Contact tokens: {len(tokens.emails)} email(s), "
            f"{len(tokens.phones)} phone(s), website={tokens.website!r}"
        )
        return tokens

    def extract_emails(self, lines: Sequence[str], text: str) -> Tuple[List[str], List[str]]:
        emails: List[str] = []
        raw: List[str] = []
        seen = set()

        def add(candidate: str, source: str) -> None:
            email = normalize_email(candidate)
            if not email:
                logger.debug(f"Rejected email candidate: {candidate!r}")
                return
            raw.append(source)
            if email not in seen:
                seen.add(email)
                emails.append(email)

        for match in self.patterns["email"].finditer(text):
            add(match.group(0), match.group(0))

        # Whole lines broken up by spacing: "john . smith @ acme . com"
        for line in lines:
            if "@" in line and not self.patterns["email"].search(line):
                add(strip_contact_labels(line), line)

        return emails, raw

    def extract_phones(self, text: str) -> Tuple[List[str], List[str]]:
        phones: List[str] = []
        raw: List[str] = []
        seen = set()
        for match in self.patterns["phone"].finditer(text):
            phone = canonicalize_phone(match.group(0))
            if not phone:
                logger.debug(f"Rejected phone candidate: {match.group(0)!r}")
                continue
            raw.append(match.group(0).strip())
            key = phone_key(phone)
            if key not in seen:
                seen.add(key)
                phones.append(phone)
        return phones, raw

    def extract_website(self, text: str) -> Tuple[str, str]:
        """First valid website in text, falling back to "example com" repair.

        Returns:
            (normalized website, raw matched substring), or ("", "")
        """
        for pattern in ("website", "spaced_website"):
            for match in self.patterns[pattern].finditer(text):
                if pattern == "website" and not _is_plausible_host(match.group(0)):
                    logger.debug(f"Rejected website candidate: {match.group(0)!r}")
                    continue
                website = normalize_website(match.group(0))
                if website:
                    return website, match.group(0)
        return "", ""

    def strip_tokens(self, line: str, tokens: ContactTokens) -> str:
        """Remove every contact token from line (case-insensitive)."""
        for token in tokens.all_tokens():
            if token.lower() in line.lower():
                line = re.sub(re.escape(token), " ", line, flags=re.IGNORECASE)
        return normalize_line(line)
