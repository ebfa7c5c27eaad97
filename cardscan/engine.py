"""
Card extraction engine: multi-pass recognition and draft selection.

HOW IT WORKS:
1. Run the recognizer on the original image
2. Run it on a contrast-enhanced grayscale variant (best effort)
3. Run it on the original image again in sparse segmentation mode
Every successful pass is parsed by the linear and (with word boxes) layout
strategies; every draft is scored and the best one becomes the card.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from .errors import PassFailure
from .models import BusinessCard, ParsedCardDraft
from .parser import CardParser
from .preprocessing import ImagePreprocessor
from .recognizer import (
    SEGMENTATION_AUTO,
    SEGMENTATION_SPARSE,
    EasyOCRRecognizer,
    LanguageSet,
    ProgressCallback,
    RecognitionOptions,
    Recognizer,
)
from .scoring import DEFAULT_WEIGHTS, ScoreWeights, pick_best, score_draft
from .session import RecognizerSession

logger = logging.getLogger(__name__)

PASS_ORIGINAL = "original"
PASS_ENHANCED = "enhanced"
PASS_SPARSE = "sparse"


@dataclass
class RecognitionPass:
    """One recognizer invocation: an image variant plus options."""
    name: str
    segmentation: str = SEGMENTATION_AUTO
    preprocess: Optional[Callable[[Any], Any]] = None


@dataclass
class ScoredDraft:
    pass_name: str
    strategy: str
    draft: ParsedCardDraft
    score: float


@dataclass
class ExtractionResult:
    """Final card plus every intermediate draft and pass failure."""
    card: BusinessCard
    score: float
    candidates: List[ScoredDraft] = field(default_factory=list)
    failures: List[PassFailure] = field(default_factory=list)

    @property
    def best(self) -> Optional[ScoredDraft]:
        for candidate in self.candidates:
            if candidate.score == self.score:
                return candidate
        return None

    def to_dict(self) -> dict:
        return {
            "card": {"id": self.card.id, **self.card.to_dict()},
            "score": self.score,
            "candidates": [
                {"pass": c.pass_name, "strategy": c.strategy, "score": c.score, "fields": c.draft.to_dict()}
                for c in self.candidates
            ],
            "failed_passes": [f.pass_name for f in self.failures],
        }


def default_passes(
    preprocessor: Optional[ImagePreprocessor] = None,
    enhanced: bool = True,
    sparse: bool = True,
) -> List[RecognitionPass]:
    preprocessor = preprocessor or ImagePreprocessor()
    passes = [RecognitionPass(PASS_ORIGINAL, preprocess=preprocessor.decode_image)]
    if enhanced:
        passes.append(RecognitionPass(PASS_ENHANCED, preprocess=preprocessor.enhance_for_ocr))
    if sparse:
        passes.append(RecognitionPass(PASS_SPARSE, segmentation=SEGMENTATION_SPARSE, preprocess=preprocessor.decode_image))
    return passes


class CardExtractor:
    """Extracts a BusinessCard from a card image.

    Safe to call concurrently: the only shared state is the session's
    recognizer handle.
    """

    def __init__(
        self,
        session: Optional[RecognizerSession] = None,
        parser: Optional[CardParser] = None,
        passes: Optional[Sequence[RecognitionPass]] = None,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        scorer: Optional[Callable[[ParsedCardDraft], float]] = None,
        gpu: bool = False,
        model_dir: str = "./models",
    ):
        """
        Initialize the extractor.

        Args:
            session: Shared recognizer session (EasyOCR-backed if omitted)
            parser: Card parser (default parser if omitted)
            passes: Recognition passes, run in order
            weights: Scoring weights
            scorer: Custom draft scoring function, overrides weights
            gpu: Use GPU when the default EasyOCR session is created
            model_dir: EasyOCR model directory for the default session
        """
        if session is None:
            session = RecognizerSession(
                lambda languages: EasyOCRRecognizer(languages, gpu=gpu, model_dir=model_dir)
            )
        self.session = session
        self.parser = parser or CardParser()
        self.passes = list(passes) if passes is not None else default_passes()
        self.weights = weights
        self.scorer = scorer or (lambda draft: score_draft(draft, self.weights))

    # ======================================================
    # SINGLE IMAGE
    # ======================================================

    def extract_fields(
        self,
        image: Any,
        languages: LanguageSet,
        progress: Optional[ProgressCallback] = None,
    ) -> BusinessCard:
        """Best-effort BusinessCard for an image (see extract)."""
        return self.extract(image, languages, progress).card

    def extract(
        self,
        image: Any,
        languages: LanguageSet,
        progress: Optional[ProgressCallback] = None,
    ) -> ExtractionResult:
        """
        Run every pass, score every draft and keep the best one.

        Args:
            image: Encoded image bytes, a file path or a decoded array
            languages: Recognizer language selector, e.g. "eng+rus"
            progress: Forwarded to the recognizer on each pass

        Returns:
            ExtractionResult with the card and all scored drafts

        Raises:
            RecognizerInitError: The recognizer could not be created
            PassFailure: Every pass failed (the last failure is raised)
        """
        candidates: List[ScoredDraft] = []
        failures: List[PassFailure] = []

        with self.session.acquire(languages) as recognizer:
            for recognition_pass in self.passes:
                try:
                    drafts = self._run_pass(recognizer, recognition_pass, image, progress)
                except Exception as e:
                    failure = PassFailure(recognition_pass.name, e)
                    failure.__cause__ = e
                    failures.append(failure)
                    logger.warning(f"Pass '{recognition_pass.name}' failed: {e}")
                    continue

                for strategy, draft in drafts:
                    score = self.scorer(draft)
                    candidates.append(ScoredDraft(recognition_pass.name, strategy, draft, score))
                    logger.debug(f"Draft {recognition_pass.name}/{strategy} scored {score}")

        succeeded = {c.pass_name for c in candidates}
        if not succeeded and failures:
            raise failures[-1]

        picked = pick_best(candidates, lambda c: c.score)
        if picked is None:
            card = BusinessCard()
            score = 0
        else:
            best, score = picked
            card = BusinessCard.from_draft(best.draft)
            logger.info(f"Selected {best.pass_name}/{best.strategy} draft with score {score}")

        return ExtractionResult(card=card, score=score, candidates=candidates, failures=failures)

    def _run_pass(
        self,
        recognizer: Recognizer,
        recognition_pass: RecognitionPass,
        image: Any,
        progress: Optional[ProgressCallback],
    ):
        logger.info(f"Running recognition pass '{recognition_pass.name}'")
        variant = recognition_pass.preprocess(image) if recognition_pass.preprocess else image
        options = RecognitionOptions(segmentation=recognition_pass.segmentation, progress=progress)
        result = recognizer.recognize(variant, options)
        return self.parser.parse_result(result.text, result.words)

    # ======================================================
    # STATUS
    # ======================================================

    def get_status(self) -> dict:
        return {
            "passes": [p.name for p in self.passes],
            "recognizer": self.session.status(),
        }
