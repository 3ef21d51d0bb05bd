"""Integration tests for FoodStore against a seeded database."""

import logging

import pytest

from food_locales.models import (
    CategoryLocal,
    Food,
    FoodLocalList,
    FoodNutrientMapping,
    LocalFood,
)
from food_locales.services.database import session_scope
from food_locales.services.dto import (
    CopyFood,
    CopyLocalFood,
    FoodCompositionTableReference,
    InheritableAttributes,
    NewFood,
    NewLocalFood,
    PortionSizeMethod,
)
from food_locales.services.exceptions import (
    CopySourceMissing,
    DuplicateFoodCodeError,
    LocaleNotFound,
)
from food_locales.services.food_store import FoodStore

NDNS_400 = FoodCompositionTableReference("NDNS", "400")


@pytest.fixture
def store():
    return FoodStore()


class TestGlobalFoods:
    """Tests for global food records."""

    def test_get_duplicate_codes(self, seeded_db, store):
        with session_scope() as session:
            assert store.get_duplicate_codes(["APPL", "24XX", "TEA", "APPL"], session) == {
                "APPL",
                "TEA",
            }
            assert store.get_duplicate_codes([], session) == set()

    def test_create_foods(self, seeded_db, store):
        with session_scope() as session:
            store.create_foods(
                [
                    NewFood(
                        "24BA",
                        "Banana",
                        1,
                        InheritableAttributes(use_in_recipes=2),
                        ("FRUT", "DRNK"),
                    )
                ],
                session,
            )

        with session_scope() as session:
            food = session.get(Food, "24BA")
            assert food.description == "Banana"
            assert food.food_group_id == 1
            assert food.version
            assert food.attributes.use_in_recipes == 2
            assert food.attributes.reasonable_amount is None
            assert sorted(c.category_code for c in food.categories) == ["DRNK", "FRUT"]

    def test_create_foods_existing_code(self, seeded_db, store):
        with pytest.raises(DuplicateFoodCodeError) as exc_info:
            with session_scope() as session:
                store.create_foods(
                    [NewFood("24BA", "Banana", 1), NewFood("APPL", "Apple again", 1)], session
                )

        assert exc_info.value.codes == ["24BA", "APPL"]
        assert exc_info.value.retryable is True

        with session_scope() as session:
            assert session.get(Food, "24BA") is None
            assert session.get(Food, "APPL").description == "Apple"

    def test_copy_foods(self, seeded_db, store):
        with session_scope() as session:
            store.copy_foods([CopyFood("APPL", "24APPE", "Apple, peeled")], session)

        with session_scope() as session:
            food = session.get(Food, "24APPE")
            assert food.description == "Apple, peeled"
            assert food.food_group_id == 5
            assert food.attributes.same_as_before_option is True
            assert food.attributes.reasonable_amount == 500
            assert food.attributes.use_in_recipes == 0
            assert [c.category_code for c in food.categories] == ["FRUT"]

    def test_copy_food_without_attributes(self, seeded_db, store):
        with session_scope() as session:
            store.copy_foods([CopyFood("MILK", "24OAMI", "Oat milk")], session)

        with session_scope() as session:
            food = session.get(Food, "24OAMI")
            assert food.food_group_id == 8
            assert food.attributes is None
            assert food.categories == []

    def test_copy_foods_missing_source(self, seeded_db, store):
        with pytest.raises(CopySourceMissing) as exc_info:
            with session_scope() as session:
                store.copy_foods(
                    [CopyFood("NOPE", "24NO", "Nope"), CopyFood("APPL", "24AP", "Apple")],
                    session,
                )

        assert exc_info.value.codes == ["NOPE"]
        assert str(exc_info.value) == "Invalid source food codes: NOPE"

        with session_scope() as session:
            assert session.get(Food, "24AP") is None


class TestLocalFoods:
    """Tests for writing and copying local data."""

    def test_create_local_foods_replaces_existing_data(self, seeded_db, store):
        with session_scope() as session:
            store.create_local_foods(
                [
                    NewLocalFood(
                        "APPL",
                        "Pomme crème",
                        (NDNS_400,),
                        (PortionSizeMethod.guide_image("bread"),),
                    )
                ],
                "en_GB",
                session,
            )

        with session_scope() as session:
            local = session.get(LocalFood, ("APPL", "en_GB"))
            assert local.local_description == "Pomme crème"
            assert local.simple_local_description == "Pomme creme"

            assert store.get_nutrient_table_codes(["APPL"], "en_GB", session) == {
                "APPL": [NDNS_400]
            }
            (method,) = store.get_portion_size_methods(["APPL"], "en_GB", session)["APPL"]
            assert method.method == "guide-image"
            assert method.parameter("guide-image-id") == "bread"
            assert store.get_associated_foods(["APPL"], "en_GB", session) == {"APPL": []}

            # Other foods are untouched
            assert store.get_brands(["TEA"], "en_GB", session)["TEA"] == ["PG Tips", "Yorkshire Tea"]

    def test_create_local_food_without_description(self, seeded_db, store):
        with session_scope() as session:
            store.create_local_foods([NewLocalFood("MILK", None)], "en_IN", session)

        with session_scope() as session:
            local = session.get(LocalFood, ("MILK", "en_IN"))
            assert local.local_description is None
            assert local.simple_local_description is None

    def test_copy_local_foods(self, seeded_db, store):
        with session_scope() as session:
            store.copy_local_foods("en_GB", "en_IN", [CopyLocalFood("TEA", "TEA", "Chai")], session)

        with session_scope() as session:
            assert session.get(LocalFood, ("TEA", "en_IN")).local_description == "Chai"
            assert store.get_nutrient_table_codes(["TEA"], "en_IN", session)["TEA"] == [
                FoodCompositionTableReference("NDNS", "200")
            ]

            (method,) = store.get_portion_size_methods(["TEA"], "en_IN", session)["TEA"]
            assert method.method == "drink-scale"
            assert method.description == "in_a_mug"
            assert method.use_for_recipes is False
            assert method.parameter("drinkware-id") == "mugs"

            (assoc,) = store.get_associated_foods(["TEA"], "en_IN", session)["TEA"]
            assert assoc.food_code == "MILK"
            assert assoc.category_code is None
            assert assoc.prompt_text == "Did you have milk in your tea?"

            assert store.get_brands(["TEA"], "en_IN", session)["TEA"] == ["PG Tips", "Yorkshire Tea"]

    def test_copy_local_foods_fct_override(self, seeded_db, store):
        with session_scope() as session:
            store.copy_local_foods(
                "en_GB", "en_IN", [CopyLocalFood("APPL", "APPL", "Seb", NDNS_400)], session
            )

        with session_scope() as session:
            assert store.get_nutrient_table_codes(["APPL"], "en_IN", session)["APPL"] == [NDNS_400]

            (method,) = store.get_portion_size_methods(["APPL"], "en_IN", session)["APPL"]
            assert [p.name for p in method.parameters] == [
                "serving-image-set",
                "leftovers-image-set",
            ]

            (assoc,) = store.get_associated_foods(["APPL"], "en_IN", session)["APPL"]
            assert assoc.category_code == "FRUT"

    def test_copy_local_foods_twice_replaces(self, seeded_db, store):
        for description in ("Chai", "Masala chai"):
            with session_scope() as session:
                store.copy_local_foods(
                    "en_GB", "en_IN", [CopyLocalFood("TEA", "TEA", description)], session
                )

        with session_scope() as session:
            assert session.get(LocalFood, ("TEA", "en_IN")).local_description == "Masala chai"
            assert len(store.get_brands(["TEA"], "en_IN", session)["TEA"]) == 2
            assert len(store.get_portion_size_methods(["TEA"], "en_IN", session)["TEA"]) == 1
            assert (
                session.query(FoodNutrientMapping)
                .filter_by(food_code="TEA", locale_id="en_IN")
                .count()
                == 1
            )

    def test_copy_local_data_to_new_code(self, seeded_db, store):
        with session_scope() as session:
            store.copy_foods([CopyFood("TEA", "24GRTE", "Green tea")], session)
            store.copy_local_foods(
                "en_GB", "en_GB", [CopyLocalFood("TEA", "24GRTE", "Green tea")], session
            )

        with session_scope() as session:
            assert session.get(LocalFood, ("24GRTE", "en_GB")).local_description == "Green tea"
            assert store.get_brands(["24GRTE"], "en_GB", session)["24GRTE"] == [
                "PG Tips",
                "Yorkshire Tea",
            ]


class TestLocaleLists:
    """Tests for food list membership and category names."""

    def test_add_foods_to_locale_skips_listed(self, seeded_db, store):
        with session_scope() as session:
            assert store.add_foods_to_locale(["APPL", "TEA", "APPL"], "en_IN", session) == 2

        with session_scope() as session:
            assert store.add_foods_to_locale(["APPL", "MILK"], "en_IN", session) == 1
            assert store.add_foods_to_locale([], "en_IN", session) == 0

        with session_scope() as session:
            codes = {
                code
                for (code,) in session.query(FoodLocalList.food_code).filter_by(locale_id="en_IN")
            }
            assert codes == {"APPL", "TEA", "MILK"}

    def test_copy_categories_keeps_existing_names(self, seeded_db, store):
        with session_scope() as session:
            assert store.copy_categories("en_GB", "en_IN", session) == 1

        with session_scope() as session:
            assert session.get(CategoryLocal, ("FRUT", "en_IN")).local_description == "Fruit"
            assert session.get(CategoryLocal, ("DRNK", "en_IN")).local_description == "Peya"

    def test_copy_categories_unknown_locale(self, seeded_db, store):
        with pytest.raises(LocaleNotFound) as exc_info:
            with session_scope() as session:
                store.copy_categories("en_GB", "xx_XX", session)

        assert exc_info.value.locale_id == "xx_XX"


class TestReads:
    """Tests for the read helpers."""

    def test_every_code_has_an_entry(self, seeded_db, store):
        with session_scope() as session:
            methods = store.get_portion_size_methods(["APPL", "MILK"], "en_GB", session)
            assert methods["MILK"] == []
            assert methods["APPL"][0].parameter("serving-image-set") == "apples"

            assert store.get_brands(["APPL"], "en_GB", session) == {"APPL": []}
            assert store.get_nutrient_table_codes([], "en_GB", session) == {}

    def test_copy_with_several_fct_records_warns(self, seeded_db, store, caplog):
        with session_scope() as session:
            session.add(
                FoodNutrientMapping(
                    food_code="TEA",
                    locale_id="en_GB",
                    nutrient_table_id="NDNS",
                    nutrient_table_record_id="400",
                )
            )

        with caplog.at_level(logging.WARNING):
            with session_scope() as session:
                store.copy_local_foods(
                    "en_GB", "en_IN", [CopyLocalFood("TEA", "TEA", "Chai")], session
                )

        with session_scope() as session:
            assert store.get_nutrient_table_codes(["TEA"], "en_IN", session)["TEA"] == [
                FoodCompositionTableReference("NDNS", "200"),
                NDNS_400,
            ]

        assert "More than one food composition record for TEA in en_GB" in caplog.text
