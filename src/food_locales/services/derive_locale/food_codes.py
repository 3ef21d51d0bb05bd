"""Food code generation and deduplication.

Codes for new foods are derived from the English description: the last two
digits of the current year followed by the first two letters of each word,
upper-cased, cut to 8 characters and padded to at least 4.

Collisions are resolved with a two-digit numeric suffix: the suffix is
incremented when present, otherwise "00" is added (replacing trailing
characters so the code stays within 8 characters).

Examples:
    >>> make_code("Chicken tikka masala", year=2024)
    '24CHTIMA'
    >>> make_code("Tea", year=2024)
    '24TE'
    >>> make_code("A", year=2024)
    '24AX'
    >>> deduplicate_code("24CHTIMA")
    '24CHTI00'
    >>> deduplicate_code("24CHTI00")
    '24CHTI01'
"""

import datetime
import logging
from typing import AbstractSet, Dict, Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from food_locales.services.exceptions import CodeGenerationExhausted
from food_locales.utils.constants import (
    FOOD_CODE_PADDING_CHAR,
    MAX_CODE_ATTEMPTS,
    MAX_FOOD_CODE_LENGTH,
    MIN_FOOD_CODE_LENGTH,
)

logger = logging.getLogger(__name__)

_SUFFIX_LENGTH = 2
_MAX_SUFFIX = 99


def make_code(description: str, year: Optional[int] = None) -> str:
    """Build the initial code candidate for a description.

    Args:
        description: English description of the food
        year: Calendar year to stamp; defaults to the current year

    Returns:
        Code of 4 to 8 characters
    """
    if year is None:
        year = datetime.date.today().year

    kept = "".join(
        ch for ch in description if ch.isalpha() or ch.isdecimal() or ch.isspace()
    )
    initials = "".join(word[:2].upper() for word in kept.split())

    code = f"{year % 100:02d}{initials}"[:MAX_FOOD_CODE_LENGTH]
    return code.ljust(MIN_FOOD_CODE_LENGTH, FOOD_CODE_PADDING_CHAR)


def deduplicate_code(code: str) -> str:
    """Return the next code variant.

    Raises:
        CodeGenerationExhausted: If the code already ends in 99
    """
    suffix = code[-_SUFFIX_LENGTH:]

    if len(suffix) == _SUFFIX_LENGTH and suffix.isascii() and suffix.isdigit():
        value = int(suffix)
        if value < _MAX_SUFFIX:
            return f"{code[:-_SUFFIX_LENGTH]}{value + 1:02d}"
        raise CodeGenerationExhausted(f"Ran out of code variants for {code}", last_code=code)

    if len(code) == MAX_FOOD_CODE_LENGTH:
        return code[:-2] + "00"
    if len(code) == MAX_FOOD_CODE_LENGTH - 1:
        return code[:-1] + "00"
    return code + "00"


def deduplicate_code_avoiding(code: str, disallowed: AbstractSet[str]) -> str:
    """Return the first variant of code that is not in disallowed.

    Raises:
        CodeGenerationExhausted: If the variants run out first
    """
    candidate = deduplicate_code(code)
    while candidate in disallowed:
        candidate = deduplicate_code(candidate)
    return candidate


def make_unique_code_and_remember(
    description: str, in_run_codes: Set[str], year: Optional[int] = None
) -> str:
    """Pick a code not yet used in this run and record it.

    Args:
        description: English description of the new food
        in_run_codes: Codes already assigned during this run; updated in place
        year: Calendar year to stamp; defaults to the current year

    Returns:
        The chosen code

    Raises:
        CodeGenerationExhausted: If no free code is found in MAX_CODE_ATTEMPTS tries
    """
    candidate = make_code(description, year)

    for _ in range(MAX_CODE_ATTEMPTS):
        if candidate not in in_run_codes:
            logger.debug(f"{candidate} is unique")
            in_run_codes.add(candidate)
            return candidate

        logger.debug(f"Tried {candidate}, already taken")
        candidate = deduplicate_code(candidate)

    raise CodeGenerationExhausted(
        f"Failed to produce unique code for {description} in {MAX_CODE_ATTEMPTS} attempts "
        f"(last attempted code: {candidate})",
        last_code=candidate,
    )


def _initial_substitutions(duplicates: Set[str], candidates: List[str]) -> Dict[str, str]:
    substitutions: Dict[str, str] = {}
    candidate_set = set(candidates)

    for code in candidates:
        if code in duplicates:
            disallowed = candidate_set | set(substitutions.values())
            substitutions[code] = deduplicate_code_avoiding(code, disallowed)

    return substitutions


def ensure_unique_in_database(
    candidate_codes: Iterable[str], store, session: Session
) -> Dict[str, str]:
    """
    Map in-run codes that already exist in the database to free codes.

    Replacement codes avoid every candidate and every other replacement, and
    are themselves checked against the database until none collide.

    Args:
        candidate_codes: Codes chosen during this run, in row order
        store: Object with get_duplicate_codes(codes, session)
        session: Database session for the lookups

    Returns:
        Dictionary of original code -> replacement, only for collisions

    Raises:
        CodeGenerationExhausted: If collisions remain after MAX_CODE_ATTEMPTS checks
    """
    candidates = list(dict.fromkeys(candidate_codes))

    duplicates = store.get_duplicate_codes(candidates, session)
    if not duplicates:
        return {}

    substitutions = _initial_substitutions(set(duplicates), candidates)

    for _ in range(MAX_CODE_ATTEMPTS):
        colliding = store.get_duplicate_codes(list(substitutions.values()), session)

        if not colliding:
            logger.debug(f"Substituted {len(substitutions)} food codes already in the database")
            return substitutions

        used = set(candidates) | set(substitutions.values())
        for original, replacement in substitutions.items():
            if replacement in colliding:
                new_code = deduplicate_code_avoiding(replacement, used)
                used.add(new_code)
                substitutions[original] = new_code

    raise CodeGenerationExhausted(
        f"Failed to get rid of duplicate food codes in {MAX_CODE_ATTEMPTS} attempts"
    )
