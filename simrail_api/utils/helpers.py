"""
Utility helper functions for station identity handling.
"""
import unicodedata
from typing import Any

# Letters that carry a stroke rather than a combining mark, so NFKD leaves them intact
_STROKE_LETTERS = str.maketrans({
    "Ł": "L", "ł": "l",
    "Đ": "D", "đ": "d",
    "Ø": "O", "ø": "o",
    "Ħ": "H", "ħ": "h",
    "Ŧ": "T", "ŧ": "t",
})


def safe_str(value: Any, default: str = "") -> str:
    """
    Safely convert value to string, handling None.

    Args:
        value: Any value to convert
        default: Default string if value is None

    Returns:
        String representation or default
    """
    if value is None:
        return default
    return str(value)


def remove_accents(text: str) -> str:
    """
    Remove diacritics while keeping case.

    Examples:
        "ŁA" -> "LA"
        "Częstochowa" -> "Czestochowa"
        "Kraków" -> "Krakow"
    """
    if not text:
        return ""
    # NFKD decomposes characters, then we remove combining marks
    text = unicodedata.normalize("NFKD", text.translate(_STROKE_LETTERS))
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def station_code(prefix: Any) -> str:
    """
    Derive the lookup code of a dispatch station from its prefix.

    Diacritics are stripped and the first character is upper-cased; the rest
    of the prefix is kept as-is. Applying it to a code returns the same code.
    """
    code = remove_accents(safe_str(prefix))
    return code[:1].upper() + code[1:]
