"""
Text normalization for recognized lines and final field values.

All functions are total: they never raise, they only narrow their input.
"""

import re

_WHITESPACE = re.compile(r"\s+")

# Glyphs produced by table rulings, bullets and quote marks at line starts
_LEADING_JUNK = re.compile(r"^[\s|`'\"‘’‚“”„«»~_=*•·°,;:!\\/–—-]+")

# One or two stray letters read from an icon or bullet: "e: ...", "m John ..."
_NOISE_PREFIX_COLON = re.compile(r"^[A-Za-zА-Яа-яЁё]{1,2}\s*:\s*")
_NOISE_PREFIX_CAPITAL = re.compile(r"^(?:[a-zа-яё]{1,2}|[A-Za-zА-Яа-яЁё])\s+(?=[A-ZА-ЯЁ])")

_FIELD_SEPARATORS = " \t,;:|/\\-–—·•.*_~"

# Lone "ai" / "a" / "i" misread in front of a capitalized word
_ARTIFACT_BEFORE_CAPITAL = re.compile(r"(?:(?<=\s)|^)(?:ai|a|i)\s+(?=[A-ZА-ЯЁ])")
_ARTIFACT_BEFORE_DIGIT = re.compile(r"(?:(?<=\s)|^)Boy\s+(?=\d)")

_KEEP_PERIOD = re.compile(r"\b(?:inc|ltd|corp|co|llc|jr|sr)$", re.IGNORECASE)


def normalize_line(raw: str) -> str:
    """Collapse whitespace, drop pipes and leading ruling glyphs.

    Args:
        raw: A recognized line, possibly None or empty

    Returns:
        The cleaned line ("" when nothing is left)
    """
    if not raw:
        return ""
    line = raw.replace("|", " ")
    line = _WHITESPACE.sub(" ", line).strip()
    line = _LEADING_JUNK.sub("", line)
    return line.strip()


def clean_semantic_line(raw: str) -> str:
    """Normalize a line and strip a spurious 1-2 letter prefix.

    The prefix is only dropped when something meaningful remains.
    """
    line = normalize_line(raw)
    for pattern in (_NOISE_PREFIX_COLON, _NOISE_PREFIX_CAPITAL):
        stripped = pattern.sub("", line, count=1).strip()
        if stripped and stripped != line:
            return normalize_line(stripped)
    return line


def cleanup_field_text(value: str) -> str:
    """Final cleanup applied to name/title/company/address values."""
    text = normalize_line(value)
    if not text:
        return ""
    text = _ARTIFACT_BEFORE_CAPITAL.sub("", text)
    text = _ARTIFACT_BEFORE_DIGIT.sub("", text)
    trailing_period = text.endswith(".")
    text = text.strip(_FIELD_SEPARATORS)
    # "Acme Inc." keeps its period
    if trailing_period and _KEEP_PERIOD.search(text):
        text += "."
    return _WHITESPACE.sub(" ", text).strip()
