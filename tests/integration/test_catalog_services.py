"""Integration tests for locale and catalog lookups."""

import pytest

from food_locales.services import (
    category_service,
    locale_service,
    nutrient_table_service,
    portion_size_service,
)
from food_locales.services.dto import FoodCompositionTableReference
from food_locales.services.exceptions import LocaleNotFound


class TestLocaleService:
    def test_get_locale(self, seeded_db):
        locale = locale_service.get_locale("en_NZ")
        assert locale.english_name == "New Zealand"
        assert locale.prototype_locale_id == "en_GB"

    def test_get_locale_missing(self, seeded_db):
        with pytest.raises(LocaleNotFound) as exc_info:
            locale_service.get_locale("xx_XX")

        assert str(exc_info.value) == "Locale xx_XX does not exist"


def test_check_food_composition_codes(seeded_db):
    errors = nutrient_table_service.check_food_composition_codes(
        [
            FoodCompositionTableReference("XXX", "1"),
            FoodCompositionTableReference("NDNS", "100"),
            FoodCompositionTableReference("NDNS", "999"),
            FoodCompositionTableReference("NDNS", "999"),
        ]
    )

    assert errors == [
        "Food composition record 999 does not exist in table NDNS",
        "Food composition record 1 does not exist in table XXX",
    ]


def test_check_food_composition_codes_empty(seeded_db):
    assert nutrient_table_service.check_food_composition_codes([]) == []


def test_check_category_codes(seeded_db):
    assert category_service.check_category_codes(["FRUT", "ZZZ", "NOPE", "ZZZ"]) == [
        'Category "ZZZ" does not exist',
        'Category "NOPE" does not exist',
    ]


def test_portion_size_catalogs(seeded_db):
    assert portion_size_service.get_as_served_set_ids() == {"apples", "apples_leftovers", "chips"}
    assert portion_size_service.get_guide_image_ids() == {"bread"}
    assert portion_size_service.get_drinkware_ids() == {"mugs"}


def test_check_food_composition_codes_large_sheet(seeded_db):
    references = [FoodCompositionTableReference("NDNS", str(i)) for i in range(1500)]

    errors = nutrient_table_service.check_food_composition_codes(references)

    assert len(errors) == 1500 - 4
    assert "Food composition record 100 does not exist in table NDNS" not in errors
    assert "Food composition record 1499 does not exist in table NDNS" in errors
