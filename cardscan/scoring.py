"""
Heuristic scoring of card drafts.

The score is a ranking device, not a probability. The weights are
empirically tuned; only their relative ordering is meaningful.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from .contacts import EMAIL_SHAPE_RE, MAX_PHONE_DIGITS, MIN_PHONE_DIGITS, phone_digits
from .models import ParsedCardDraft

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ScoreWeights:
    name: int = 45
    company: int = 30
    title: int = 20
    email: int = 40
    phone: int = 30
    website: int = 15
    address: int = 20
    multi_word_name: int = 10
    long_address: int = 8
    long_address_length: int = 20

    # Penalties for suspicious values
    penalize_suspicious: bool = True
    short_company: int = 25
    digits_in_name: int = 30
    short_title: int = 10


DEFAULT_WEIGHTS = ScoreWeights()


def score_draft(draft: ParsedCardDraft, weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """Score a draft; filling a previously empty field never lowers it.

    Args:
        draft: Candidate record
        weights: Tunable weights

    Returns:
        Integer score (0 for an empty draft)
    """
    score = 0

    if draft.name:
        score += weights.name
        if len(draft.name.split()) >= 2:
            score += weights.multi_word_name
    if draft.company:
        score += weights.company
    if draft.title:
        score += weights.title
    if draft.email and EMAIL_SHAPE_RE.match(draft.email):
        score += weights.email
    if draft.phone and MIN_PHONE_DIGITS <= len(phone_digits(draft.phone)) <= MAX_PHONE_DIGITS:
        score += weights.phone
    if draft.website and "@" not in draft.website:
        score += weights.website
    if draft.address:
        score += weights.address
        if len(draft.address) > weights.long_address_length:
            score += weights.long_address

    if weights.penalize_suspicious:
        if draft.company and len(draft.company) < 2:
            score -= weights.short_company
        if draft.name and any(c.isdigit() for c in draft.name):
            score -= weights.digits_in_name
        if draft.title and len(draft.title) < 3:
            score -= weights.short_title

    return score


def pick_best(
    items: Sequence[T], score: Callable[[T], float]
) -> Optional[Tuple[T, float]]:
    """Highest-scoring item; ties go to the earliest one."""
    best = None
    best_score = None
    for item in items:
        value = score(item)
        if best_score is None or value > best_score:
            best, best_score = item, value
    if best_score is None:
        return None
    return best, best_score
