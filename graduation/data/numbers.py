"""
Locale-aware number parsing.

Transcripts print decimals either way ("3,45" or "3.45"); every numeric
value read from a source goes through normalize_decimal before float().
"""

import math


def normalize_decimal(text: str) -> float:
    """
    Parse a decimal written with a comma or dot separator.

    When both separators appear, the right-most one is the decimal separator
    and the other is a thousands separator ("1.234,5" -> 1234.5).

    Raises:
        ValueError: if the text is not a finite number
    """
    cleaned = str(text).strip().replace(" ", "")
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")

    value = float(cleaned)
    if not math.isfinite(value):
        raise ValueError(f"Not a finite number: {text!r}")
    return value
