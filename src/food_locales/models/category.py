"""
Category models.

Categories are global (like foods); only their display names are
per-locale.
"""

from sqlalchemy import Column, String, Boolean, ForeignKey

from .base import BaseModel, new_version


class Category(BaseModel):
    """
    Category model.

    Attributes:
        code: Category code (e.g., "MHDK")
        description: English description
        is_hidden: Hidden categories are not shown while browsing
        version: Version stamp
    """

    __tablename__ = "categories"

    code = Column(String(8), primary_key=True)
    description = Column(String(128), nullable=False)
    is_hidden = Column(Boolean, nullable=False, default=False)
    version = Column(String(36), nullable=False, default=new_version)


class CategoryLocal(BaseModel):
    """Locale-specific display name of a category."""

    __tablename__ = "categories_local"

    category_code = Column(
        String(8), ForeignKey("categories.code", ondelete="CASCADE"), primary_key=True
    )
    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), primary_key=True)
    local_description = Column(String(128), nullable=True)
    simple_local_description = Column(String(128), nullable=True)
    version = Column(String(36), nullable=False, default=new_version)
