"""
Portion-size method models and the image catalogs they reference.

A food's portion-size methods are an ordered list per locale (ordered by
id). Each method is parameterised by name/value pairs, several of which
point into the read-only catalogs defined below.
"""

from sqlalchemy import Column, String, Integer, Boolean, Float, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class FoodPortionSizeMethod(BaseModel):
    """
    One portion-size estimation method for a (food, locale) pair.

    Attributes:
        method: Method kind ("as-served", "guide-image", "drink-scale", "cereal", ...)
        description: Label shown to the respondent
        image_url: Thumbnail for the method selection screen
        use_for_recipes: Whether the method is offered when the food is a recipe ingredient
        conversion_factor: Multiplier applied to the estimated portion weight
    """

    __tablename__ = "foods_portion_size_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=False)
    locale_id = Column(String(16), ForeignKey("locales.id", ondelete="CASCADE"), nullable=False)
    method = Column(String(32), nullable=False)
    description = Column(String(128), nullable=False)
    image_url = Column(String(512), nullable=False)
    use_for_recipes = Column(Boolean, nullable=False, default=False)
    conversion_factor = Column(Float, nullable=False, default=1.0)

    parameters = relationship(
        "FoodPortionSizeMethodParameter",
        back_populates="portion_size_method",
        cascade="all, delete-orphan",
        order_by="FoodPortionSizeMethodParameter.id",
    )

    __table_args__ = (Index("idx_foods_psm_food_locale", "food_code", "locale_id"),)


class FoodPortionSizeMethodParameter(BaseModel):
    """Named parameter of a portion-size method."""

    __tablename__ = "foods_portion_size_method_params"

    id = Column(Integer, primary_key=True, autoincrement=True)
    portion_size_method_id = Column(
        Integer,
        ForeignKey("foods_portion_size_methods.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(String(32), nullable=False)
    value = Column(String(128), nullable=False)

    portion_size_method = relationship("FoodPortionSizeMethod", back_populates="parameters")


class AsServedSet(BaseModel):
    """Series of photographs of increasing portion sizes."""

    __tablename__ = "as_served_sets"

    id = Column(String(32), primary_key=True)
    description = Column(String(128), nullable=False)


class GuideImage(BaseModel):
    """Single image showing several standard portions to choose from."""

    __tablename__ = "guide_images"

    id = Column(String(32), primary_key=True)
    description = Column(String(128), nullable=False)


class DrinkwareSet(BaseModel):
    """Set of drinking vessels with fill-level scales."""

    __tablename__ = "drinkware_sets"

    id = Column(String(32), primary_key=True)
    description = Column(String(128), nullable=False)
