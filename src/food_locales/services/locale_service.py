"""Locale lookups."""

from sqlalchemy.orm import Session

from food_locales.models import Locale
from food_locales.services.database import session_scope
from food_locales.services.exceptions import LocaleNotFound


def _get_locale_impl(locale_id: str, session: Session) -> Locale:
    locale = session.get(Locale, locale_id)

    if locale is None:
        raise LocaleNotFound(locale_id)

    return locale


def get_locale(locale_id: str, session: Session = None) -> Locale:
    """Retrieve a locale by id.

    Args:
        locale_id: Locale identifier (e.g. "en_NZ")
        session: Optional SQLAlchemy session for transaction sharing.
                 If None, creates a new session scope.

    Returns:
        Locale: The locale, including its prototype_locale_id

    Raises:
        LocaleNotFound: If the locale does not exist

    Example:
        >>> locale = get_locale("en_NZ")
        >>> locale.prototype_locale_id
        'en_GB'
    """
    if session is not None:
        return _get_locale_impl(locale_id, session)

    with session_scope() as session:
        return _get_locale_impl(locale_id, session)
