"""
Parse paths turning one recognition result into card drafts.

    parse_text    - linear path over the recognized text
    parse_layout  - layout path over word boxes (left/right columns)
    parse_result  - both paths for one pass, layout merged over linear
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .classifier import FieldClassifier, merge_drafts
from .contacts import ContactExtractor, ContactTokens
from .layout import cluster_lines, filter_words, split_columns
from .models import OcrLine, ParsedCardDraft, RecognizedWord
from .normalizer import clean_semantic_line, normalize_line
from .patterns import is_contact_label, strip_contact_labels

logger = logging.getLogger(__name__)

LINEAR = "linear"
LAYOUT = "layout"


class CardParser:
    """Runs contact extraction and field classification over recognizer output."""

    def __init__(
        self,
        extractor: Optional[ContactExtractor] = None,
        classifier: Optional[FieldClassifier] = None,
    ):
        self.extractor = extractor or ContactExtractor()
        self.classifier = classifier or FieldClassifier()

    # =========================
    # PIPELINE API
    # =========================

    def parse_text(self, text: str) -> ParsedCardDraft:
        """Linear strategy over raw recognized text."""
        lines = self._split_text(text)
        tokens = self.extractor.extract(lines)
        semantic = [self._semantic_line(line, tokens) for line in lines]
        draft = self.classifier.classify([l for l in semantic if l])
        return self._with_contacts(draft, tokens)

    def parse_layout(self, words: Sequence[RecognizedWord]) -> ParsedCardDraft:
        """Layout strategy over word boxes; empty draft when no usable words.

        Lines are clustered by vertical position only, so columns printed on
        a shared baseline read as one line and are not told apart.
        """
        lines = cluster_lines(filter_words(words))
        if not lines:
            return ParsedCardDraft()

        texts = [normalize_line(line.text) for line in lines]
        tokens = self.extractor.extract([t for t in texts if t])

        kept: List[OcrLine] = []
        semantic = {}
        for line, text in zip(lines, texts):
            cleaned = self._semantic_line(text, tokens)
            if cleaned:
                kept.append(line)
                semantic[id(line)] = cleaned

        left, right = split_columns(kept)
        logger.debug(f"Layout: {len(lines)} lines, {len(left)} left, {len(right)} right")
        draft = self.classifier.classify_columns(
            [semantic[id(l)] for l in left],
            [semantic[id(l)] for l in right],
        )
        return self._with_contacts(draft, tokens)

    def parse_result(
        self, text: str, words: Optional[Sequence[RecognizedWord]] = None
    ) -> List[Tuple[str, ParsedCardDraft]]:
        """Drafts for one pass: linear always, layout when word boxes exist.

        The layout draft is merged field-by-field over the linear draft,
        preferring the layout value wherever it is non-empty.
        """
        linear = self.parse_text(text)
        drafts = [(LINEAR, linear)]
        if words:
            layout = self.parse_layout(words)
            drafts.append((LAYOUT, merge_drafts(layout, linear)))
        return drafts

    # =========================
    # HELPERS
    # =========================

    def _split_text(self, text: str) -> List[str]:
        lines = []
        for raw in (text or "").splitlines():
            line = normalize_line(raw)
            if line:
                lines.append(line)
        return lines

    def _semantic_line(self, line: str, tokens: ContactTokens) -> str:
        stripped = self.extractor.strip_tokens(line, tokens)
        if not stripped or is_contact_label(stripped):
            return ""
        stripped = strip_contact_labels(stripped)
        if is_contact_label(stripped):
            return ""
        return clean_semantic_line(stripped)

    def _with_contacts(self, draft: ParsedCardDraft, tokens: ContactTokens) -> ParsedCardDraft:
        draft.email = tokens.email
        draft.phone = tokens.phone
        draft.website = tokens.website
        return draft
