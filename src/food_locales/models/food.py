"""
Food models for the global food reference data.

A Food is shared by every locale. Its code is the food's permanent
identity: codes are unique across the whole database and are never
reused once assigned.
"""

from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel, new_version


class Food(BaseModel):
    """
    Food model representing one global food record.

    Attributes:
        code: Food code (up to 8 characters, e.g. "24APJU")
        description: English description
        food_group_id: Nutrient food group
        version: Version stamp, replaced on every write
    """

    __tablename__ = "foods"

    code = Column(String(8), primary_key=True)
    description = Column(String(128), nullable=False)
    food_group_id = Column(Integer, nullable=False)
    version = Column(String(36), nullable=False, default=new_version)

    attributes = relationship(
        "FoodAttributes",
        back_populates="food",
        uselist=False,
        cascade="all, delete-orphan",
    )
    categories = relationship(
        "FoodCategory",
        back_populates="food",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation of food."""
        return f"<Food(code='{self.code}', description='{self.description}')>"


class FoodAttributes(BaseModel):
    """
    Inheritable food attributes.

    Null values mean "inherit from the parent categories".

    Attributes:
        food_code: Owning food
        same_as_before_option: Offer the "same as before" shortcut
        ready_meal_option: Offer the "ready meal" question
        reasonable_amount: Upper bound for a plausible portion weight
        use_in_recipes: 0 = anywhere, 1 = regular food only, 2 = recipe ingredient only
    """

    __tablename__ = "foods_attributes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_code = Column(
        String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=False, unique=True
    )
    same_as_before_option = Column(Boolean, nullable=True)
    ready_meal_option = Column(Boolean, nullable=True)
    reasonable_amount = Column(Integer, nullable=True)
    use_in_recipes = Column(Integer, nullable=True)

    food = relationship("Food", back_populates="attributes")


class FoodCategory(BaseModel):
    """Membership of a food in a category."""

    __tablename__ = "foods_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_code = Column(String(8), ForeignKey("foods.code", ondelete="CASCADE"), nullable=False)
    category_code = Column(
        String(8), ForeignKey("categories.code", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (UniqueConstraint("food_code", "category_code", name="uq_foods_categories"),)

    food = relationship("Food", back_populates="categories")
