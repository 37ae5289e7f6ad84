#!/usr/bin/env python3
"""
Text normalization helpers shared by line reconstruction, classification and
title matching.

Two entry points are used by callers:
    sanitize_text  - NFKC + bidi stripping + whitespace, for lines that get classified
    normalize_soft - punctuation + whitespace only, for matching titles against
                     externally supplied names where NFKC could break exact lookups
"""

import re
import unicodedata

CURRENCY = "₪"

# Invisible and bidi control characters
BIDI_CONTROLS = (
    "\u200b", "\u200c", "\u200d", "\ufeff", "\u200e", "\u200f",
    "\u202a", "\u202b", "\u202c", "\u202d", "\u202e",
    "\u2066", "\u2067", "\u2068", "\u2069", "\u2060",
)

# Non-breaking and thin spaces
SPECIAL_SPACES = ("\u00a0", "\u202f", "\u2009")

PUNCTUATION_MAP = {
    "\u2018": "'", "\u2019": "'", "\u201a": "'", "\u02b9": "'",
    "\u05f3": "'",  # geresh
    "\u201c": '"', "\u201d": '"',
    "\u05f4": '"',  # gershayim
    "\u2013": "-", "\u2014": "-",
    "\u05be": "-",  # maqaf
}

_BIDI_RE = re.compile("[" + "".join(BIDI_CONTROLS) + "]")
_SPECIAL_SPACE_RE = re.compile("[" + "".join(SPECIAL_SPACES) + "]")
_PUNCTUATION_TABLE = str.maketrans(PUNCTUATION_MAP)


def normalize_unicode(text: str) -> str:
    return unicodedata.normalize("NFKC", text or "")


def strip_bidi_controls(text: str) -> str:
    return _BIDI_RE.sub("", text or "")


def normalize_whitespace(text: str) -> str:
    """Turn tabs and special spaces into plain spaces, collapse runs and trim."""
    text = (text or "").replace("\t", " ")
    text = _SPECIAL_SPACE_RE.sub(" ", text)
    return re.sub(r"\s+", " ", text).strip()


def normalize_punctuation(text: str) -> str:
    return (text or "").translate(_PUNCTUATION_TABLE)


def normalize_currency(text: str) -> str:
    """Spell the currency with its glyph: 'ILS' becomes '₪' and '₪₪' collapses."""
    text = (text or "").replace("ILS", CURRENCY)
    return text.replace(CURRENCY + CURRENCY, CURRENCY)


def sanitize_text(text: str) -> str:
    """
    Full sanitize for lines destined for classification.

    Args:
        text: Raw line text

    Returns:
        NFKC-composed text without bidi controls and with collapsed whitespace
    """
    return normalize_whitespace(strip_bidi_controls(normalize_unicode(text)))


def normalize_soft(text) -> str:
    """Punctuation unification + whitespace collapse, used for fuzzy title matching."""
    if text is None:
        return ""
    return normalize_whitespace(normalize_punctuation(str(text)))


def clean_line(text: str) -> str:
    """Clean a table line before it is matched against the row grammar."""
    text = strip_bidi_controls(normalize_punctuation(text))
    return normalize_whitespace(normalize_currency(text))
