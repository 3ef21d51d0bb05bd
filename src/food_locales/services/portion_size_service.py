"""Portion-size image and drinkware catalogs.

The catalogs are read-only here: the locale derivation engine only needs
to know which ids exist.
"""

from typing import Set

from sqlalchemy.orm import Session

from food_locales.models import AsServedSet, DrinkwareSet, GuideImage
from food_locales.services.database import session_scope


def _ids(model, session: Session) -> Set[str]:
    return {row_id for (row_id,) in session.query(model.id)}


def get_as_served_set_ids(session: Session = None) -> Set[str]:
    """Return the ids of all as-served image sets (leftovers sets included)."""
    if session is not None:
        return _ids(AsServedSet, session)

    with session_scope() as session:
        return _ids(AsServedSet, session)


def get_guide_image_ids(session: Session = None) -> Set[str]:
    """Return the ids of all guide images."""
    if session is not None:
        return _ids(GuideImage, session)

    with session_scope() as session:
        return _ids(GuideImage, session)


def get_drinkware_ids(session: Session = None) -> Set[str]:
    """Return the ids of all drinkware sets."""
    if session is not None:
        return _ids(DrinkwareSet, session)

    with session_scope() as session:
        return _ids(DrinkwareSet, session)
