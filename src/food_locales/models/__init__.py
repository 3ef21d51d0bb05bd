"""
Database models package.

This package contains all SQLAlchemy ORM models for the food database.
"""

from .base import Base, BaseModel, new_version
from .locale import Locale
from .food import Food, FoodAttributes, FoodCategory
from .category import Category, CategoryLocal
from .local_food import LocalFood, FoodNutrientMapping, AssociatedFood, Brand, FoodLocalList
from .portion_size import (
    FoodPortionSizeMethod,
    FoodPortionSizeMethodParameter,
    AsServedSet,
    GuideImage,
    DrinkwareSet,
)
from .nutrient_table import NutrientTable, NutrientTableRecord

__all__ = [
    "Base",
    "BaseModel",
    "new_version",
    # Global reference data
    "Locale",
    "Food",
    "FoodAttributes",
    "FoodCategory",
    "Category",
    "CategoryLocal",
    # Local data
    "LocalFood",
    "FoodNutrientMapping",
    "AssociatedFood",
    "Brand",
    "FoodLocalList",
    "FoodPortionSizeMethod",
    "FoodPortionSizeMethodParameter",
    # Catalogs
    "AsServedSet",
    "GuideImage",
    "DrinkwareSet",
    "NutrientTable",
    "NutrientTableRecord",
]
