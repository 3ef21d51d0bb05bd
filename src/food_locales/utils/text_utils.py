"""Text normalization helpers for food descriptions.

Examples:
    >>> strip_accents("Crème brûlée")
    'Creme brulee'

    >>> capitalize_first("naan bread")
    'Naan bread'
"""

import logging
import unicodedata
from typing import Optional

from .constants import MAX_DESCRIPTION_LENGTH

logger = logging.getLogger(__name__)


def strip_accents(text: Optional[str]) -> Optional[str]:
    """Remove combining accents, keeping the base characters.

    Unlike slug generation this keeps case, spacing and punctuation; the
    result is the "simple" description used for accent-insensitive search.

    Args:
        text: Text to simplify, or None

    Returns:
        Text without diacritics, or None if text is None
    """
    if text is None:
        return None

    # NFD decomposition splits "é" into "e" + combining acute accent
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def capitalize_first(text: str) -> str:
    """Uppercase the first character only, leaving the rest untouched."""
    if not text:
        return text
    return text[0].upper() + text[1:]


def truncate_description(description: Optional[str], food_code: str) -> Optional[str]:
    """Truncate a description to the database column width.

    Logs a warning naming the food when truncation happens.

    Args:
        description: Description to store, or None
        food_code: Food the description belongs to (for the warning)

    Returns:
        Description of at most MAX_DESCRIPTION_LENGTH characters, or None
    """
    if description is None:
        return None

    if len(description) > MAX_DESCRIPTION_LENGTH:
        logger.warning(
            f"Description too long for food {food_code}, truncating: {description}"
        )
        return description[:MAX_DESCRIPTION_LENGTH]

    return description
