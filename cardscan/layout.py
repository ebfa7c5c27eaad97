"""
Layout analysis over word-level recognition output.

Words are clustered into visual lines by vertical proximity, then the lines
are split into a left and a right column around the median horizontal
centroid. Lines inside the dead zone around the median belong to neither
column.
"""

import logging
import math
import re
from typing import Iterable, List, Sequence, Tuple

from .models import OcrLine, RecognizedWord
from .normalizer import normalize_line

logger = logging.getLogger(__name__)

MIN_LINE_THRESHOLD = 8.0
LINE_HEIGHT_FACTOR = 0.7
COLUMN_DEAD_ZONE = 10.0
# Short tokens below this confidence are treated as speckle
LOW_CONFIDENCE = 20.0
SHORT_TOKEN_LENGTH = 3

_MEANINGFUL_CHAR = re.compile(r"[^\W_]|[@.+]")


def median(values: Sequence[float]) -> float:
    ordered = sorted(values)
    if not ordered:
        return 0.0
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2.0


def _is_usable(word: RecognizedWord) -> bool:
    box = word.bbox
    coords = (box.x0, box.y0, box.x1, box.y1)
    if not all(isinstance(c, (int, float)) and math.isfinite(c) for c in coords):
        return False
    if box.x1 <= box.x0 or box.y1 <= box.y0:
        return False
    if len(word.text) <= SHORT_TOKEN_LENGTH and word.confidence < LOW_CONFIDENCE:
        return False
    return bool(_MEANINGFUL_CHAR.search(word.text))


def filter_words(words: Iterable[RecognizedWord]) -> List[RecognizedWord]:
    """Drop empty, degenerate, speckle and symbol-only words.

    Surviving words carry normalized text.
    """
    kept = []
    for word in words:
        text = normalize_line(word.text)
        if not text:
            continue
        if text != word.text:
            word = RecognizedWord(text=text, confidence=word.confidence, bbox=word.bbox)
        if _is_usable(word):
            kept.append(word)
    return kept


def cluster_lines(words: Sequence[RecognizedWord]) -> List[OcrLine]:
    """Greedily group words into lines by vertical centroid.

    Args:
        words: Words with valid boxes (see filter_words)

    Returns:
        Lines sorted top-to-bottom, each with words sorted left-to-right
    """
    if not words:
        return []

    threshold = max(MIN_LINE_THRESHOLD, LINE_HEIGHT_FACTOR * median([w.bbox.height for w in words]))
    ordered = sorted(words, key=lambda w: (w.bbox.center_y, w.bbox.x0))

    lines: List[OcrLine] = []
    for word in ordered:
        best = None
        best_distance = None
        for line in lines:
            distance = abs(line.centroid_y - word.bbox.center_y)
            if distance <= threshold and (best_distance is None or distance < best_distance):
                best, best_distance = line, distance
        if best is None:
            best = OcrLine()
            lines.append(best)
        best.add(word)

    for line in lines:
        line.sort_words()
    lines.sort(key=lambda l: l.centroid_y)

    logger.debug(f"Clustered {len(words)} words into {len(lines)} lines (threshold={threshold:.1f})")
    return lines


def split_columns(lines: Sequence[OcrLine]) -> Tuple[List[OcrLine], List[OcrLine]]:
    """Split lines into (left, right) around the median horizontal centroid."""
    if not lines:
        return [], []
    center = median([line.centroid_x for line in lines])
    left = [line for line in lines if line.centroid_x < center - COLUMN_DEAD_ZONE]
    right = [line for line in lines if line.centroid_x > center + COLUMN_DEAD_ZONE]
    return left, right
