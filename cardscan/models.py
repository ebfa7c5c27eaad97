"""
Data model for the business card inference engine.

Recognition passes produce ``RecognizedWord`` objects; the layout analyzer
groups them into ``OcrLine`` objects; the parse paths turn either form into a
``ParsedCardDraft``; the orchestrator promotes the best draft to a
``BusinessCard``.
"""

import uuid
from dataclasses import dataclass, field, fields
from typing import Dict, List


CARD_FIELDS = ("name", "title", "company", "email", "phone", "website", "address")


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in image pixel coordinates."""
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center_x(self) -> float:
        return (self.x0 + self.x1) / 2.0

    @property
    def center_y(self) -> float:
        return (self.y0 + self.y1) / 2.0


@dataclass(frozen=True)
class RecognizedWord:
    text: str
    confidence: float
    bbox: BoundingBox


@dataclass
class OcrLine:
    """Words believed to lie on one visual line.

    The centroid is recomputed on every ``add`` so later words can pull the
    line towards them while clustering is in progress.
    """
    words: List[RecognizedWord] = field(default_factory=list)
    centroid_x: float = 0.0
    centroid_y: float = 0.0

    def add(self, word: RecognizedWord) -> None:
        self.words.append(word)
        count = len(self.words)
        self.centroid_x = sum(w.bbox.center_x for w in self.words) / count
        self.centroid_y = sum(w.bbox.center_y for w in self.words) / count

    def sort_words(self) -> None:
        self.words.sort(key=lambda w: w.bbox.x0)

    @property
    def text(self) -> str:
        return " ".join(w.text for w in self.words)


@dataclass
class ParsedCardDraft:
    """Candidate contact record. Empty string means "unknown"."""
    name: str = ""
    title: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    address: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) or "" for f in fields(self)}

    def filled_fields(self) -> List[str]:
        return [name for name in CARD_FIELDS if getattr(self, name)]

    def is_empty(self) -> bool:
        return not self.filled_fields()


@dataclass
class BusinessCard(ParsedCardDraft):
    """A finalized draft with a stable identifier owned by the caller."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_draft(cls, draft: ParsedCardDraft) -> "BusinessCard":
        return cls(**{name: getattr(draft, name) or "" for name in CARD_FIELDS})
