"""Category lookups."""

from typing import Iterable, List

from sqlalchemy.orm import Session

from food_locales.models import Category
from food_locales.services.database import session_scope


def _check_category_codes_impl(codes: List[str], session: Session) -> List[str]:
    if not codes:
        return []

    existing = {
        code for (code,) in session.query(Category.code).filter(Category.code.in_(codes))
    }

    return [f'Category "{code}" does not exist' for code in codes if code not in existing]


def check_category_codes(codes: Iterable[str], session: Session = None) -> List[str]:
    """
    Report category codes that do not exist.

    Args:
        codes: Category codes to check; repeats are reported once
        session: Optional SQLAlchemy session for transaction sharing.
                 If None, creates a new session scope.

    Returns:
        One message per unknown code, in first-seen order
    """
    unique_codes = list(dict.fromkeys(codes))

    if session is not None:
        return _check_category_codes_impl(unique_codes, session)

    with session_scope() as session:
        return _check_category_codes_impl(unique_codes, session)
