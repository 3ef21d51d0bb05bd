"""
Declarative base shared by the food database models.

Food tables are keyed by their natural codes (food code, locale id,
category code), so the abstract base adds behaviour only, no columns.
Tables that take part in optimistic concurrency carry a `version` column
holding a random UUID that is replaced on every write.
"""

import uuid as uuid_lib

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_version() -> str:
    """Fresh version stamp."""
    return str(uuid_lib.uuid4())


class BaseModel(Base):
    """Abstract base with a primary-key repr."""

    __abstract__ = True

    def __repr__(self) -> str:
        # e.g. LocalFood(food_code='24APPL', locale_id='en_GB')
        keys = ", ".join(
            f"{column.key}={getattr(self, column.key, None)!r}"
            for column in self.__table__.primary_key.columns
            if getattr(self, column.key, None) is not None
        )
        return f"{self.__class__.__name__}({keys})"
