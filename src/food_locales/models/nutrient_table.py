"""
Food composition table (FCT) catalog models.

An FCT is an external nutrient database (e.g. "NDNS", "NZFCD"); local
foods link to one of its records through FoodNutrientMapping.
"""

from sqlalchemy import Column, String, ForeignKey

from .base import BaseModel


class NutrientTable(BaseModel):
    """Food composition table."""

    __tablename__ = "nutrient_tables"

    id = Column(String(32), primary_key=True)
    description = Column(String(512), nullable=False)


class NutrientTableRecord(BaseModel):
    """One record (food entry) in a food composition table."""

    __tablename__ = "nutrient_table_records"

    id = Column(String(32), primary_key=True)
    nutrient_table_id = Column(
        String(32), ForeignKey("nutrient_tables.id", ondelete="CASCADE"), primary_key=True
    )
    english_description = Column(String(512), nullable=False, default="")
    local_description = Column(String(512), nullable=True)
