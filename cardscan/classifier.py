"""
Rule-based field classification for business card lines.

The classifier receives lines that are already normalized and stripped of
contact tokens, and assigns them to name, title, company and address.

Two strategies share the same field rules:
    classify          - linear strategy over the flat, ordered line list
    classify_columns  - layout strategy over left/right column line lists

Fields that no rule matches are left empty; nothing here raises.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from .models import CARD_FIELDS, ParsedCardDraft
from .normalizer import cleanup_field_text, normalize_line
from .patterns import (
    ADDRESS_RE,
    CAPITALIZED_WORD_RE,
    CONTACT_LABEL_RE,
    LETTERS_WORD_RE,
    NAME_RE,
    TITLE_ANCHOR_RE,
    find_title_anchor,
    has_name_stopword,
    is_address_line,
    is_company_line,
    is_person_ish,
    is_strict_title_word,
    is_title_line,
)

logger = logging.getLogger(__name__)

# Noise-line thresholds (empirically tuned)
NOISE_MAX_LENGTH = 220
NOISE_MAX_TOKENS = 35
NOISE_MIN_ALPHA = 6
NOISE_MAX_WEIRD = 6
NOISE_WEIRD_RATIO = 0.6
NOISE_SHORT_LENGTH = 40
NOISE_LONG_LENGTH = 120

# Name search
NAME_MIN_WINDOW_SCORE = 15
NAME_WINDOW_WORD_WEIGHT = 10
NAME_WINDOW_STRICT_WEIGHT = 5
NAME_TITLE_LINE_PENALTY = 25
NAME_COMPANY_LINE_PENALTY = 25
NAME_DIGIT_LINE_PENALTY = 30
NAME_LINE_MIN_LENGTH = 4
NAME_LINE_MAX_LENGTH = 56

COMPANY_MAX_LENGTH = 64
MAX_TITLE_SEGMENTS = 3

_PUNCTUATION = set(".,;:!?'\"()[]{}/\\-–—&+@#%*№«»‘’“”")
_DIGIT_OR_AT = re.compile(r"[\d@]")


def is_noise_line(line: str) -> bool:
    """True for recognizer garbage: decorative borders, logos, speckle."""
    text = (line or "").strip()
    if not text:
        return True
    if len(text) > NOISE_MAX_LENGTH or len(text.split()) > NOISE_MAX_TOKENS:
        return True
    if not any(c.isalnum() for c in text):
        return True

    alpha = sum(1 for c in text if c.isalpha())
    weird = sum(1 for c in text if not (c.isalnum() or c.isspace() or c in _PUNCTUATION))
    if alpha < NOISE_MIN_ALPHA and weird > NOISE_MAX_WEIRD:
        return True
    if len(text) <= NOISE_SHORT_LENGTH and weird > NOISE_WEIRD_RATIO * alpha:
        return True

    if len(text) > NOISE_LONG_LENGTH and not _DIGIT_OR_AT.search(text):
        has_vocabulary = (
            CONTACT_LABEL_RE.search(text) or ADDRESS_RE.search(text) or is_title_line(text)
        )
        if not has_vocabulary:
            return True
    return False


@dataclass
class Segment:
    """A comma-separated piece of a line, remembering its source line."""
    text: str
    line_index: int
    line_is_address: bool


def merge_drafts(primary: ParsedCardDraft, fallback: ParsedCardDraft) -> ParsedCardDraft:
    """Field-by-field merge preferring primary's non-empty values."""
    merged = {}
    for name in CARD_FIELDS:
        merged[name] = getattr(primary, name) or getattr(fallback, name) or ""
    return ParsedCardDraft(**merged)


class FieldClassifier:
    """Assigns cleaned, contact-stripped lines to card fields."""

    # ==========================================
    # STRATEGIES
    # ==========================================

    def classify(self, lines: Sequence[str]) -> ParsedCardDraft:
        """Linear strategy over the full ordered line list.

        Args:
            lines: Normalized, contact-stripped lines

        Returns:
            Draft with name/title/company/address filled where rules matched
        """
        lines = self.prepare(lines)
        name = self.find_name(lines)
        segments = self.segment(self.remove_name(lines, name))

        title, title_ids = self.extract_title(segments)
        others = [s for i, s in enumerate(segments) if i not in title_ids]
        company = self.extract_company(others)
        address = self.extract_address([s for s in others if s is not company], company)

        return self._draft(name, title, company.text if company else "", address)

    def classify_columns(self, left: Sequence[str], right: Sequence[str]) -> ParsedCardDraft:
        """Layout strategy: person fields from one column, organization from the other.

        The person column is the one where a name is found; when both
        columns yield a name, the one with more title lines wins, and the
        right column wins ties.
        """
        left = self.prepare(left)
        right = self.prepare(right)

        left_name = self.find_name(left)
        right_name = self.find_name(right)
        if left_name and right_name:
            right_titles = sum(1 for l in right if is_title_line(l))
            left_titles = sum(1 for l in left if is_title_line(l))
            person_is_right = right_titles >= left_titles
        elif right_name or left_name:
            person_is_right = bool(right_name)
        else:
            logger.debug("Layout strategy found no name in either column")
            return ParsedCardDraft()

        person, org = (right, left) if person_is_right else (left, right)
        name = right_name if person_is_right else left_name

        person_segments = self.segment(self.remove_name(person, name))
        title, _ = self.extract_title(person_segments)

        org_segments = self.segment(org)
        _, org_title_ids = self.extract_title(org_segments)
        org_others = [s for i, s in enumerate(org_segments) if i not in org_title_ids]
        company = self.extract_company(org_others)
        address = self.extract_address([s for s in org_others if s is not company], company)

        logger.debug(f"Layout strategy: person column={'right' if person_is_right else 'left'}")
        return self._draft(name, title, company.text if company else "", address)

    # ==========================================
    # LINE HANDLING
    # ==========================================

    def prepare(self, lines: Sequence[str]) -> List[str]:
        prepared = []
        for line in lines:
            clean = normalize_line(line)
            if clean and not is_noise_line(clean):
                prepared.append(clean)
        return prepared

    def remove_name(self, lines: Sequence[str], name: str) -> List[str]:
        if not name:
            return list(lines)
        remaining = []
        for line in lines:
            stripped = normalize_line(line.replace(name, " ", 1))
            if stripped:
                remaining.append(stripped)
        return remaining

    def segment(self, lines: Sequence[str]) -> List[Segment]:
        segments = []
        for index, line in enumerate(lines):
            line_is_address = is_address_line(line)
            for piece in line.split(","):
                text = normalize_line(piece)
                if text:
                    segments.append(Segment(text, index, line_is_address))
        return segments

    # ==========================================
    # NAME
    # ==========================================

    def find_name(self, lines: Sequence[str]) -> str:
        """Pattern match, then scored window search, then single-line shape."""
        for strategy in (self._name_by_pattern, self._name_by_window, self._name_by_line):
            name = strategy(lines)
            if name:
                logger.debug(f"Name found by {strategy.__name__}: {name!r}")
                return name
        return ""

    def _is_acceptable_name(self, text: str) -> bool:
        return not (
            has_name_stopword(text)
            or is_title_line(text)
            or is_company_line(text)
            or ADDRESS_RE.search(text)
            or TITLE_ANCHOR_RE.search(text)
        )

    def _name_by_pattern(self, lines: Sequence[str]) -> str:
        for line in lines:
            if is_address_line(line):
                continue
            for match in NAME_RE.finditer(line):
                words = match.group(0).split()
                spans = [words]
                # A title or organization span is not cut down into a name
                if len(words) == 3 and not (is_title_line(match.group(0)) or is_company_line(match.group(0))):
                    spans += [words[:2], words[1:]]
                for span in spans:
                    candidate = " ".join(span)
                    if candidate in line and self._is_acceptable_name(candidate):
                        return candidate
        return ""

    def _name_by_window(self, lines: Sequence[str]) -> str:
        best, best_score = "", None
        for line in lines:
            if is_address_line(line):
                continue
            penalty = 0
            if is_title_line(line):
                penalty += NAME_TITLE_LINE_PENALTY
            if is_company_line(line):
                penalty += NAME_COMPANY_LINE_PENALTY
            if _DIGIT_OR_AT.search(line):
                penalty += NAME_DIGIT_LINE_PENALTY

            tokens = line.split()
            for size in (2, 3):
                for start in range(len(tokens) - size + 1):
                    words = tokens[start:start + size]
                    if not all(LETTERS_WORD_RE.match(w) and w[0].isupper() for w in words):
                        continue
                    span = " ".join(words)
                    if not self._is_acceptable_name(span):
                        continue
                    strict = sum(1 for w in words if is_strict_title_word(w))
                    score = (
                        size * NAME_WINDOW_WORD_WEIGHT
                        + strict * NAME_WINDOW_STRICT_WEIGHT
                        - penalty
                    )
                    if best_score is None or score > best_score:
                        best, best_score = span, score

        if best_score is not None and best_score >= NAME_MIN_WINDOW_SCORE:
            return best
        return ""

    def _name_by_line(self, lines: Sequence[str]) -> str:
        for line in lines:
            words = line.split()
            if not 2 <= len(words) <= 4:
                continue
            if not NAME_LINE_MIN_LENGTH <= len(line) <= NAME_LINE_MAX_LENGTH:
                continue
            if _DIGIT_OR_AT.search(line):
                continue
            if not all(CAPITALIZED_WORD_RE.match(w) for w in words):
                continue
            if is_title_line(line) or is_company_line(line) or is_address_line(line):
                continue
            return line
        return ""

    # ==========================================
    # TITLE / COMPANY / ADDRESS
    # ==========================================

    def extract_title(self, segments: Sequence[Segment]) -> Tuple[str, Set[int]]:
        """Join up to three title segments, each trimmed to its first anchor.

        Returns:
            (title text, indices of every segment classified as title)
        """
        titles: List[str] = []
        used: Set[int] = set()
        for index, seg in enumerate(segments):
            if not is_title_line(seg.text) or is_address_line(seg.text):
                continue
            used.add(index)
            anchor = find_title_anchor(seg.text)
            text = seg.text[anchor:].strip() if anchor else seg.text
            if text and text not in titles:
                titles.append(text)
        return ", ".join(titles[:MAX_TITLE_SEGMENTS]), used

    def extract_company(self, segments: Sequence[Segment]) -> Optional[Segment]:
        for seg in segments:
            if is_company_line(seg.text) and not is_address_line(seg.text):
                return seg
        for seg in segments:
            if len(seg.text) > COMPANY_MAX_LENGTH:
                continue
            if seg.line_is_address or is_address_line(seg.text):
                continue
            if is_title_line(seg.text) or is_person_ish(seg.text):
                continue
            return seg
        return None

    def extract_address(self, segments: Sequence[Segment], company: Optional[Segment]) -> str:
        parts = [s.text for s in segments if s.line_is_address or is_address_line(s.text)]
        if not parts:
            parts = [s.text for s in segments]
        address = ", ".join(parts)

        if company and address.lower().startswith(company.text.lower()):
            address = address[len(company.text):].lstrip(" ,;-")
        return address

    def _draft(self, name: str, title: str, company: str, address: str) -> ParsedCardDraft:
        return ParsedCardDraft(
            name=cleanup_field_text(name),
            title=cleanup_field_text(title),
            company=cleanup_field_text(company),
            address=cleanup_field_text(address),
        )
