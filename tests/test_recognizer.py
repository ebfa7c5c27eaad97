"""
Tests for the EasyOCR-backed recognizer.

easyocr is replaced with a mock module, so no models are downloaded.
"""

import sys
from unittest.mock import MagicMock, Mock, patch

import pytest

from cardscan.models import BoundingBox
from cardscan.recognizer import (
    SEGMENTATION_AUTO,
    SEGMENTATION_SPARSE,
    EasyOCRRecognizer,
    RecognitionOptions,
    parse_language_set,
)


class TestParseLanguageSet:

    @pytest.mark.parametrize("selector, expected", [
        ("eng", ("en",)),
        ("eng+rus", ("en", "ru")),
        ("en,ru", ("en", "ru")),
        (["en", "EN", "rus"], ("en", "ru")),
        ("", ("en",)),
        (None, ("en",)),
        ("+", ("en",)),
        ("deu", ("de",)),
    ])
    def test_parse(self, selector, expected):
        assert parse_language_set(selector) == expected


class TestEasyOCRRecognizer:
    """Test cases for EasyOCRRecognizer."""

    @pytest.fixture
    def easyocr_module(self):
        module = MagicMock()
        reader = module.Reader.return_value
        reader.readtext.return_value = [
            ([[0, 0], [50, 0], [50, 20], [0, 20]], "John", 0.98),
            ([[55, 1], [110, 1], [110, 21], [55, 21]], "Smith", 0.95),
            ([[0, 40], [140, 40], [140, 60], [0, 60]], "Senior Engineer", 0.9),
            ([[0, 80], [10, 80], [10, 90], [0, 90]], "  ", 0.1),
        ]
        with patch.dict(sys.modules, {"easyocr": module}):
            yield module

    @pytest.fixture
    def recognizer(self, easyocr_module, tmp_path):
        return EasyOCRRecognizer(["en", "ru"], gpu=False, model_dir=str(tmp_path / "models"))

    def test_reader_created_with_languages(self, recognizer, easyocr_module, tmp_path):
        easyocr_module.Reader.assert_called_once()
        kwargs = easyocr_module.Reader.call_args.kwargs
        assert kwargs["lang_list"] == ["en", "ru"]
        assert kwargs["gpu"] is False
        assert (tmp_path / "models").is_dir()

    def test_recognize_words_and_text(self, recognizer):
        result = recognizer.recognize(b"image", RecognitionOptions())

        assert result.text == "John Smith\nSenior Engineer"
        assert [w.text for w in result.words] == ["John", "Smith", "Senior Engineer"]
        assert result.words[0].confidence == pytest.approx(98.0)
        assert result.words[1].bbox == BoundingBox(55, 1, 110, 21)

    def test_sparse_segmentation_params(self, recognizer, easyocr_module):
        recognizer.recognize(b"image", RecognitionOptions(segmentation=SEGMENTATION_SPARSE))

        kwargs = easyocr_module.Reader.return_value.readtext.call_args.kwargs
        assert kwargs["width_ths"] == EasyOCRRecognizer.SEGMENTATION_PARAMS[SEGMENTATION_SPARSE]["width_ths"]
        assert kwargs["detail"] == 1
        assert kwargs["paragraph"] is False

    def test_auto_segmentation_params(self, recognizer, easyocr_module):
        recognizer.recognize(b"image", RecognitionOptions(segmentation=SEGMENTATION_AUTO))

        kwargs = easyocr_module.Reader.return_value.readtext.call_args.kwargs
        assert "width_ths" not in kwargs

    def test_progress_reported(self, recognizer):
        progress = Mock()

        recognizer.recognize(b"image", RecognitionOptions(progress=progress))

        assert [c.args[0] for c in progress.call_args_list] == [0.0, 1.0]

    def test_terminate(self, recognizer):
        recognizer.terminate()

        with pytest.raises(RuntimeError):
            recognizer.recognize(b"image", RecognitionOptions())
