"""
Recognizer collaborator: the interface the engine consumes and an EasyOCR
implementation of it.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from .layout import cluster_lines
from .models import BoundingBox, RecognizedWord

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, Optional[str]], None]
LanguageSet = Union[str, Sequence[str]]

SEGMENTATION_AUTO = "auto"
SEGMENTATION_SPARSE = "sparse"

# Tesseract-style codes accepted for compatibility with "eng+rus" selectors
LANGUAGE_ALIASES: Dict[str, str] = {
    "eng": "en",
    "rus": "ru",
    "ukr": "uk",
    "deu": "de",
    "ger": "de",
    "fra": "fr",
    "fre": "fr",
    "spa": "es",
    "ita": "it",
}


def parse_language_set(languages: Optional[LanguageSet]) -> Tuple[str, ...]:
    """Normalize "eng+rus", "en,ru" or ["en", "ru"] to ("en", "ru").

    Order is preserved and duplicates dropped; an empty selector means English.
    """
    if not languages:
        return ("en",)
    if isinstance(languages, str):
        parts = re.split(r"[+,;\s]+", languages)
    else:
        parts = list(languages)

    codes: List[str] = []
    for part in parts:
        code = str(part).strip().lower()
        if not code:
            continue
        code = LANGUAGE_ALIASES.get(code, code)
        if code not in codes:
            codes.append(code)
    return tuple(codes) or ("en",)


@dataclass
class RecognitionOptions:
    segmentation: str = SEGMENTATION_AUTO
    progress: Optional[ProgressCallback] = None


@dataclass
class RecognitionResult:
    text: str = ""
    words: List[RecognizedWord] = field(default_factory=list)


class Recognizer(Protocol):
    """Black-box text recognizer. Both operations may raise."""

    def recognize(self, image: Any, options: RecognitionOptions) -> RecognitionResult:
        ...

    def terminate(self) -> None:
        ...


def _quad_to_box(points: Sequence[Sequence[float]]) -> BoundingBox:
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


class EasyOCRRecognizer:
    """Recognizer backed by easyocr.Reader."""

    # readtext() overrides per segmentation mode
    SEGMENTATION_PARAMS: Dict[str, Dict[str, float]] = {
        SEGMENTATION_AUTO: {},
        # Narrow horizontal merging so separate columns stay separate regions
        SEGMENTATION_SPARSE: {"width_ths": 0.1, "add_margin": 0.05},
    }

    def __init__(
        self,
        languages: Sequence[str] = ("en",),
        gpu: bool = False,
        model_dir: str = "./models",
    ):
        """
        Initialize the EasyOCR reader.

        Args:
            languages: EasyOCR language codes
            gpu: Use GPU for OCR
            model_dir: Directory for model storage
        """
        import easyocr

        self.languages = list(languages)
        self.gpu = gpu
        os.makedirs(model_dir, exist_ok=True)

        logger.info(f"Initializing EasyOCR with languages: {self.languages}")
        self.reader = easyocr.Reader(
            lang_list=self.languages,
            gpu=self.gpu,
            model_storage_directory=model_dir,
            download_enabled=True,
            verbose=False,
        )
        logger.info("EasyOCR initialized successfully")

    def recognize(self, image: Any, options: RecognitionOptions) -> RecognitionResult:
        """
        Recognize text and word boxes in an image.

        Args:
            image: Encoded image bytes, a file path or a decoded numpy array
            options: Segmentation mode and progress callback

        Returns:
            RecognitionResult with line-ordered text and word boxes
        """
        if self.reader is None:
            raise RuntimeError("Recognizer has been terminated")

        params = self.SEGMENTATION_PARAMS.get(options.segmentation, {})
        if options.progress:
            options.progress(0.0, "recognizing text")

        results = self.reader.readtext(image, detail=1, paragraph=False, **params)

        words = []
        for points, text, confidence in results:
            text = (text or "").strip()
            if not text:
                continue
            words.append(
                RecognizedWord(
                    text=text,
                    confidence=float(confidence) * 100.0,
                    bbox=_quad_to_box(points),
                )
            )

        lines = cluster_lines(words)
        text = "\n".join(line.text for line in lines)

        if options.progress:
            options.progress(1.0, "recognizing text")
        logger.info(f"Recognized {len(words)} regions in {len(lines)} lines ({options.segmentation})")
        return RecognitionResult(text=text, words=words)

    def terminate(self) -> None:
        self.reader = None
        logger.info(f"EasyOCR reader released for languages: {self.languages}")
