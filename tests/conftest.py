"""Pytest configuration and fixtures for the food locale tests."""

import csv
import io

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from food_locales.models import (
    AsServedSet,
    AssociatedFood,
    Brand,
    Category,
    CategoryLocal,
    DrinkwareSet,
    Food,
    FoodAttributes,
    FoodCategory,
    FoodLocalList,
    FoodNutrientMapping,
    FoodPortionSizeMethod,
    FoodPortionSizeMethodParameter,
    GuideImage,
    Locale,
    LocalFood,
    NutrientTable,
    NutrientTableRecord,
)
from food_locales.models.base import Base
from food_locales.utils.spreadsheet_columns import (
    column_letters_to_offset,
    offset_to_column_letters,
)


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = create_engine("sqlite:///:memory:", echo=False)

    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import food_locales.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)

    db_module.get_session_factory = original_get_session


@pytest.fixture(scope="function")
def seeded_db(test_db):
    """Provide a database with locales, catalogs and three foods.

    Creates:
    - Locales: en_GB (source), en_NZ (prototype en_GB), en_IN (no prototype)
    - FCT records NDNS/100..400
    - Categories FRUT, DRNK, MHDK with en_GB names; en_IN already names DRNK
    - As-served sets apples, apples_leftovers, chips; guide image bread;
      drinkware set mugs
    - Foods APPL, TEA, MILK with full en_GB local data
    """
    session = test_db()

    session.add(Locale(id="en_GB", english_name="United Kingdom", local_name="United Kingdom"))
    session.flush()
    session.add(
        Locale(
            id="en_NZ",
            english_name="New Zealand",
            local_name="New Zealand",
            prototype_locale_id="en_GB",
        )
    )
    session.add(Locale(id="en_IN", english_name="India", local_name="India"))

    session.add(NutrientTable(id="NDNS", description="UK National Diet and Nutrition Survey"))
    session.flush()
    for record_id in ("100", "200", "300", "400"):
        session.add(
            NutrientTableRecord(
                id=record_id, nutrient_table_id="NDNS", english_description=f"Record {record_id}"
            )
        )

    session.add_all(
        [
            Category(code="FRUT", description="Fruit"),
            Category(code="DRNK", description="Drinks"),
            Category(code="MHDK", description="Milk in hot drinks"),
        ]
    )
    session.flush()
    session.add_all(
        [
            CategoryLocal(category_code="FRUT", locale_id="en_GB", local_description="Fruit"),
            CategoryLocal(category_code="DRNK", locale_id="en_GB", local_description="Drinks"),
            CategoryLocal(category_code="DRNK", locale_id="en_IN", local_description="Peya"),
        ]
    )

    session.add_all(
        [
            AsServedSet(id="apples", description="Apples"),
            AsServedSet(id="apples_leftovers", description="Apples leftovers"),
            AsServedSet(id="chips", description="Chips"),
            GuideImage(id="bread", description="Bread slices"),
            DrinkwareSet(id="mugs", description="Mugs"),
        ]
    )

    apple = Food(code="APPL", description="Apple", food_group_id=5)
    apple.attributes = FoodAttributes(
        same_as_before_option=True, reasonable_amount=500, use_in_recipes=0
    )
    apple.categories = [FoodCategory(category_code="FRUT")]

    tea = Food(code="TEA", description="Tea", food_group_id=7)
    tea.attributes = FoodAttributes(ready_meal_option=False)
    tea.categories = [FoodCategory(category_code="DRNK")]

    milk = Food(code="MILK", description="Milk", food_group_id=8)

    session.add_all([apple, tea, milk])
    session.flush()

    session.add_all(
        [
            LocalFood(food_code="APPL", locale_id="en_GB", local_description="Apple"),
            LocalFood(food_code="TEA", locale_id="en_GB", local_description="Tea"),
            LocalFood(food_code="MILK", locale_id="en_GB", local_description="Milk"),
            FoodNutrientMapping(
                food_code="APPL", locale_id="en_GB",
                nutrient_table_id="NDNS", nutrient_table_record_id="100",
            ),
            FoodNutrientMapping(
                food_code="TEA", locale_id="en_GB",
                nutrient_table_id="NDNS", nutrient_table_record_id="200",
            ),
            FoodNutrientMapping(
                food_code="MILK", locale_id="en_GB",
                nutrient_table_id="NDNS", nutrient_table_record_id="300",
            ),
            FoodPortionSizeMethod(
                food_code="APPL",
                locale_id="en_GB",
                method="as-served",
                description="use_an_image",
                image_url="apples.jpg",
                use_for_recipes=True,
                conversion_factor=1.0,
                parameters=[
                    FoodPortionSizeMethodParameter(name="serving-image-set", value="apples"),
                    FoodPortionSizeMethodParameter(
                        name="leftovers-image-set", value="apples_leftovers"
                    ),
                ],
            ),
            FoodPortionSizeMethod(
                food_code="TEA",
                locale_id="en_GB",
                method="drink-scale",
                description="in_a_mug",
                image_url="mugs.jpg",
                use_for_recipes=False,
                conversion_factor=1.0,
                parameters=[FoodPortionSizeMethodParameter(name="drinkware-id", value="mugs")],
            ),
            AssociatedFood(
                food_code="TEA",
                locale_id="en_GB",
                associated_food_code="MILK",
                text="Did you have milk in your tea?",
                link_as_main=False,
                generic_name="milk",
            ),
            AssociatedFood(
                food_code="APPL",
                locale_id="en_GB",
                associated_category_code="FRUT",
                text="Did you have any other fruit?",
                link_as_main=False,
                generic_name="fruit",
            ),
            Brand(food_code="TEA", locale_id="en_GB", name="PG Tips"),
            Brand(food_code="TEA", locale_id="en_GB", name="Yorkshire Tea"),
            FoodLocalList(locale_id="en_GB", food_code="APPL"),
            FoodLocalList(locale_id="en_GB", food_code="TEA"),
            FoodLocalList(locale_id="en_GB", food_code="MILK"),
        ]
    )

    session.commit()
    session.close()

    return test_db


@pytest.fixture
def make_sheet():
    """Build a CSV text stream from rows given as {column letters: value}.

    The header row names the columns A, B, C, ... so data rows start at
    spreadsheet row 2.

    Example:
        stream = make_sheet([{"A": "APPL", "G": "retain"}])
    """

    def _make(rows, width=28):
        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow([offset_to_column_letters(i) for i in range(width)])

        for cells in rows:
            row = [""] * width
            for letters, value in cells.items():
                row[column_letters_to_offset(letters)] = value
            writer.writerow(row)

        out.seek(0)
        return out

    return _make
