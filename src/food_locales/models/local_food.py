"""
Locale-specific food data.

Each locale overlays the global Food record with its own description,
nutrient mapping, associated-food prompts and brand names. Portion-size
methods live in portion_size.py. Membership of a food in a locale's food
list (FoodLocalList) is independent of whether local data exists.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    Boolean,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
)

from .base import BaseModel, new_version


class LocalFood(BaseModel):
    """
    Local food data for one (food, locale) pair.

    Attributes:
        food_code: Global food
        locale_id: Locale this data belongs to
        local_description: Description in the locale's language (None inherits)
        simple_local_description: Accent-stripped description used for search
        version: Version stamp
    """

    __tablename__ = "foods_local"

    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), primary_key=True)
    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), primary_key=True)
    local_description = Column(String(128), nullable=True)
    simple_local_description = Column(String(128), nullable=True)
    version = Column(String(36), nullable=False, default=new_version)


class FoodNutrientMapping(BaseModel):
    """Link from a local food to a food composition table record."""

    __tablename__ = "foods_nutrient_mapping"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=False)
    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), nullable=False)
    nutrient_table_id = Column(String(32), nullable=False)
    nutrient_table_record_id = Column(String(32), nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ["nutrient_table_id", "nutrient_table_record_id"],
            ["nutrient_table_records.nutrient_table_id", "nutrient_table_records.id"],
        ),
        Index("idx_foods_nutrient_mapping_food_locale", "food_code", "locale_id"),
    )


class AssociatedFood(BaseModel):
    """
    Associated food prompt ("Did you have any milk with your tea?").

    Exactly one of associated_food_code / associated_category_code is set.
    """

    __tablename__ = "associated_foods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=False)
    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), nullable=False)
    associated_food_code = Column(
        String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=True
    )
    associated_category_code = Column(
        String(8), ForeignKey("categories.code", ondelete="CASCADE"), nullable=True
    )
    text = Column(String(1024), nullable=False)
    link_as_main = Column(Boolean, nullable=False, default=False)
    generic_name = Column(String(128), nullable=False)

    __table_args__ = (Index("idx_associated_foods_food_locale", "food_code", "locale_id"),)


class Brand(BaseModel):
    """Brand name offered for a food in one locale."""

    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=False)
    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(128), nullable=False)

    __table_args__ = (Index("idx_brands_food_locale", "food_code", "locale_id"),)


class FoodLocalList(BaseModel):
    """Membership of a food in a locale's food list."""

    __tablename__ = "foods_local_lists"

    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), primary_key=True)
    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), primary_key=True)
