"""
Batch processing: several cards through one extractor on a bounded pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .engine import CardExtractor
from .models import BusinessCard
from .recognizer import LanguageSet

logger = logging.getLogger(__name__)


@dataclass
class BatchItem:
    index: int
    success: bool
    card: Optional[BusinessCard] = None
    score: float = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "success": self.success,
            "card": {"id": self.card.id, **self.card.to_dict()} if self.card else None,
            "score": self.score,
            "error": self.error,
        }


def process_batch(
    extractor: CardExtractor,
    images: Sequence[Any],
    languages: LanguageSet,
    max_workers: int = 2,
) -> List[BatchItem]:
    """
    Extract cards from several images concurrently.

    Args:
        extractor: Shared extractor (its session is shared by all workers)
        images: Encoded images
        languages: Recognizer language selector
        max_workers: Upper bound on concurrent extractions

    Returns:
        One BatchItem per image, in input order
    """
    def run(index: int, image: Any) -> BatchItem:
        try:
            result = extractor.extract(image, languages)
        except Exception as e:
            logger.error(f"Error processing card {index}: {e}")
            return BatchItem(index=index, success=False, error=str(e))
        return BatchItem(index=index, success=True, card=result.card, score=result.score)

    if not images:
        return []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        futures = [pool.submit(run, index, image) for index, image in enumerate(images)]
        items = [future.result() for future in futures]

    succeeded = sum(1 for item in items if item.success)
    logger.info(f"Processed batch of {len(items)} cards: {succeeded} succeeded, {len(items) - succeeded} failed")
    return items
