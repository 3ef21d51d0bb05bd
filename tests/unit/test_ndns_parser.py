"""Tests for the NDNS locale sheet parser."""

from food_locales.services.derive_locale import ndns_parser
from food_locales.services.derive_locale.actions import Include, New, NoAction
from food_locales.services.dto import (
    FoodCompositionTableReference,
    FoodDescription,
    PortionSizeMethod,
)


def _parse(make_sheet, *rows):
    return ndns_parser.parse_table(make_sheet(list(rows)))


class TestRetain:
    """Tests for retain / ingredient rows."""

    def test_retain_uses_existing_fct_code(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"A": "APPL", "B": "Apple", "C": "NDNS", "D": "100", "G": "retain"},
        )

        assert errors == []
        assert actions == [
            Include("APPL", "Apple", (), FoodCompositionTableReference("NDNS", "100"))
        ]

    def test_retain_falls_back_to_new_description(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"A": "APPL", "C": "NDNS", "D": "100", "F": "Eating apple", "G": "ingredient"},
        )

        assert errors == []
        assert actions[0].local_description == "Eating apple"

    def test_retain_with_copies(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {
                "A": "APPL", "B": "Apple", "C": "NDNS", "D": "100", "G": "retain+subfood",
                "H": "Apple, peeled", "I": "Apple, cored",
            },
        )

        assert errors == []
        assert actions[0].copies == (
            FoodDescription("Apple, peeled", "Apple, peeled"),
            FoodDescription("Apple, cored", "Apple, cored"),
        )

    def test_retain_requires_existing_fct_code(self, make_sheet):
        # "0" is an empty cell in exported sheets
        errors, actions = _parse(
            make_sheet,
            {"A": "APPL", "B": "Apple", "C": "NDNS", "D": "0", "G": "retain"},
        )

        assert actions == []
        assert errors == [
            "Existing food composition code (column D) is required in row 2 but the column is blank"
        ]


class TestNew:
    """Tests for new / new-ingredient rows."""

    def test_new_food(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {
                "C": "NDNS", "E": "400", "F": "Banana", "G": "new",
                "J": "apples", "N": "bread", "P": "FRUT", "Q": "FRUT", "R": "DRNK",
            },
        )

        assert errors == []
        assert actions == [
            New(
                source_row=2,
                descriptions=(FoodDescription("Banana", "Banana"),),
                categories=("FRUT", "DRNK"),
                fct_reference=FoodCompositionTableReference("NDNS", "400"),
                recipes_only=False,
                portion_size_methods=(
                    PortionSizeMethod.as_served("apples"),
                    PortionSizeMethod.guide_image("bread"),
                ),
            )
        ]

    def test_new_food_one_action_per_description(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"C": "NDNS", "D": "100", "F": "Banana", "G": "new-ndb", "H": "Banana, ripe"},
        )

        assert errors == []
        assert [a.descriptions[0].english_description for a in actions] == [
            "Banana",
            "Banana, ripe",
        ]

    def test_new_ingredient_is_recipes_only(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"C": "NDNS", "D": "100", "F": "Flour", "G": "new-ingredient+subfood"},
        )

        assert errors == []
        assert actions[0].recipes_only is True

    def test_new_requires_some_fct_code(self, make_sheet):
        errors, actions = _parse(make_sheet, {"C": "NDNS", "F": "Banana", "G": "new"})

        assert actions == []
        assert errors == [
            "Either Existing food composition code (column D) or New food composition code "
            "(column E) is required for row 2 but both are missing"
        ]


class TestReplace:
    """Tests for replace rows."""

    def test_replace_uses_new_fct_code(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"A": "TEA", "C": "NDNS", "D": "200", "E": "300", "F": "Black tea", "G": "replace"},
        )

        assert errors == []
        assert actions == [
            Include("TEA", "Black tea", (), FoodCompositionTableReference("NDNS", "300"))
        ]

    def test_replace_requires_new_fct_code(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"A": "TEA", "C": "NDNS", "D": "200", "F": "Black tea", "G": "replace+subfood"},
        )

        assert actions == []
        assert errors == [
            "New food composition code (column E) is required in row 2 but the column is blank"
        ]


class TestActions:
    """Tests for action tokens and error collection."""

    def test_exclude(self, make_sheet):
        errors, actions = _parse(make_sheet, {"A": "MILK", "G": "exclude"})
        assert errors == []
        assert actions == [NoAction()]

    def test_tokens_are_case_insensitive(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"A": "APPL", "B": "Apple", "C": "NDNS", "D": "100", "G": " RETAIN "},
        )
        assert errors == []
        assert isinstance(actions[0], Include)

    def test_unknown_action(self, make_sheet):
        errors, actions = _parse(make_sheet, {"A": "APPL", "G": "keep"})
        assert actions == []
        assert errors == ["Unexpected action in row 2: keep"]

    def test_bad_rows_do_not_stop_parsing(self, make_sheet):
        errors, actions = _parse(
            make_sheet,
            {"A": "APPL", "G": "keeep"},
            {"A": "MILK", "G": "exclude"},
            {"A": "TEA"},
        )

        assert actions == [NoAction()]
        assert errors == [
            "Unexpected action in row 2: keeep",
            "Action (column G) is required in row 4 but the column is blank",
        ]
