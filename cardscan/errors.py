"""
Exceptions raised by the business card inference engine.

Rejected contact candidates and unmatched fields are not errors: they leave
the corresponding field empty. Only recognizer failures surface here.
"""

from typing import Sequence


class CardScanError(Exception):
    """Base class for engine errors."""


class RecognizerInitError(CardScanError):
    """The recognizer handle could not be created for a language set."""

    def __init__(self, languages: Sequence[str], message: str = ""):
        self.languages = tuple(languages)
        super().__init__(
            message or f"Failed to initialize recognizer for languages: {'+'.join(self.languages)}"
        )


class PassFailure(CardScanError):
    """A single recognition pass (preprocessing or recognition) failed."""

    def __init__(self, pass_name: str, cause: BaseException):
        self.pass_name = pass_name
        self.cause = cause
        super().__init__(f"Recognition pass '{pass_name}' failed: {cause}")
