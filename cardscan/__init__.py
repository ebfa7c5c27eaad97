"""
Business card inference engine: recognized text and word boxes in,
best-effort contact record out.
"""

from .classifier import FieldClassifier, is_noise_line, merge_drafts
from .contacts import ContactExtractor, ContactTokens
from .engine import CardExtractor, ExtractionResult, RecognitionPass, ScoredDraft, default_passes
from .errors import CardScanError, PassFailure, RecognizerInitError
from .models import BoundingBox, BusinessCard, OcrLine, ParsedCardDraft, RecognizedWord
from .parser import CardParser
from .recognizer import EasyOCRRecognizer, RecognitionOptions, RecognitionResult, parse_language_set
from .scoring import ScoreWeights, score_draft
from .session import RecognizerSession

__all__ = [
    "BoundingBox",
    "BusinessCard",
    "CardExtractor",
    "CardParser",
    "CardScanError",
    "ContactExtractor",
    "ContactTokens",
    "EasyOCRRecognizer",
    "ExtractionResult",
    "FieldClassifier",
    "OcrLine",
    "ParsedCardDraft",
    "PassFailure",
    "RecognitionOptions",
    "RecognitionPass",
    "RecognitionResult",
    "RecognizedWord",
    "RecognizerInitError",
    "RecognizerSession",
    "ScoreWeights",
    "ScoredDraft",
    "default_passes",
    "is_noise_line",
    "merge_drafts",
    "parse_language_set",
    "score_draft",
]
