"""Comparison keys for raw sportsbook strings.

Every match in the system compares lookup keys, never raw text. The key is
NFC-composed, folds typographic punctuation and no-break spaces to ASCII,
collapses whitespace, and lowercases. Accents and ASCII punctuation survive:
"José" and "Jose" are different players, "St. Louis" keeps its period.
"""

import re
import unicodedata
from typing import Optional

_PUNCTUATION_FOLDS = str.maketrans(
    {
        "\u2018": "'",  # left single quote
        "\u2019": "'",  # right single quote
        "\u2032": "'",  # prime
        "\u201c": '"',  # left double quote
        "\u201d": '"',  # right double quote
        "\u2014": "-",  # em dash
        "\u2013": "-",  # en dash
        "\u2012": "-",  # figure dash
        "\u2212": "-",  # minus sign
        "\u00a0": " ",  # no-break space
        "\u202f": " ",  # narrow no-break space
    }
)

_WHITESPACE_RUN = re.compile(r"\s+")


def to_lookup_key(raw: Optional[str]) -> str:
    """Returns the stable comparison key for ``raw``. Never raises."""
    if not raw:
        return ""
    composed = unicodedata.normalize("NFC", str(raw))
    folded = composed.translate(_PUNCTUATION_FOLDS)
    collapsed = _WHITESPACE_RUN.sub(" ", folded).strip()
    # Lowercasing can emit combining marks (e.g. "İ"); recompose so the key is a fixed point
    return unicodedata.normalize("NFC", collapsed.lower())
