"""
Parser for NDNS-style locale update sheets (format "ndns1").

One row per food of the source locale, with the nutritionist's decision
in column G.

Column layout:
    A  Food code
    B  Old description
    C  Food composition table
    D  Existing food composition code
    E  New food composition code
    F  New description
    G  Action
    H-I  Copy descriptions
    J-M  As-served image set ids
    N-O  Guide image ids
    P-Y  Category codes

Actions:
    retain, retain+subfood, ingredient    -> Include
    new, new-ndb, new+subfood             -> New (one per description)
    new-ingredient, new-ingredient+subfood -> New, recipe ingredients only
    replace, replace+subfood              -> Include with a new FCT code
    exclude                               -> NoAction
"""

from typing import List, TextIO, Tuple

from food_locales.services.derive_locale.actions import FoodAction, Include, New, NoAction
from food_locales.services.derive_locale.parsing import (
    distinct,
    parse_rows,
    unexpected_action_token,
)
from food_locales.services.dto import (
    FoodCompositionTableReference,
    FoodDescription,
    PortionSizeMethod,
)
from food_locales.utils.spreadsheet_columns import SafeRowReader, column

FORMAT_ID = "ndns1"

FOOD_CODE = column("A", "Food code")
OLD_DESCRIPTION = column("B", "Old description")
FCT_ID = column("C", "Food composition table")
CURRENT_FCT_CODE = column("D", "Existing food composition code")
NEW_FCT_CODE = column("E", "New food composition code")
NEW_DESCRIPTION = column("F", "New description")
ACTION = column("G", "Action")

COPY_DESCRIPTION_INDICES = range(7, 9)
AS_SERVED_INDICES = range(9, 13)
GUIDE_INDICES = range(13, 15)
CATEGORY_INDICES = range(15, 25)

RETAIN_ACTIONS = {"retain", "retain+subfood", "ingredient"}
NEW_ACTIONS = {"new", "new-ndb", "new+subfood"}
NEW_INGREDIENT_ACTIONS = {"new-ingredient", "new-ingredient+subfood"}
REPLACE_ACTIONS = {"replace", "replace+subfood"}
EXCLUDE_ACTIONS = {"exclude"}


def _portion_size_methods(row: SafeRowReader) -> Tuple[PortionSizeMethod, ...]:
    as_served = [PortionSizeMethod.as_served(i) for i in row.collect_non_blank(AS_SERVED_INDICES)]
    guides = [PortionSizeMethod.guide_image(i) for i in row.collect_non_blank(GUIDE_INDICES)]
    return tuple(as_served + guides)


def _new_foods(row: SafeRowReader, copies: List[FoodDescription], recipes_only: bool) -> List[FoodAction]:
    new_description = row.required(NEW_DESCRIPTION)
    fct_id = row.required(FCT_ID)
    fct_code = row.one_of(CURRENT_FCT_CODE, NEW_FCT_CODE)

    fct_reference = FoodCompositionTableReference(fct_id, fct_code)
    categories = distinct(row.collect_non_blank(CATEGORY_INDICES))
    portion_size_methods = _portion_size_methods(row)

    descriptions = [FoodDescription(new_description, new_description)] + copies

    return [
        New(
            source_row=row.row_number,
            descriptions=(description,),
            categories=categories,
            fct_reference=fct_reference,
            recipes_only=recipes_only,
            portion_size_methods=portion_size_methods,
        )
        for description in descriptions
    ]


def parse_row(row: SafeRowReader) -> List[FoodAction]:
    """Parse one NDNS row into actions.

    Raises:
        RowParseError: If a required cell is blank or the action is unknown
    """
    action = row.required(ACTION)
    token = action.lower()

    copies = [FoodDescription(d, d) for d in row.collect_non_blank(COPY_DESCRIPTION_INDICES)]

    if token in RETAIN_ACTIONS:
        food_code = row.required(FOOD_CODE)
        fct_id = row.required(FCT_ID)
        fct_code = row.required(CURRENT_FCT_CODE)
        description = row.one_of(OLD_DESCRIPTION, NEW_DESCRIPTION)
        return [
            Include(
                food_code,
                description,
                tuple(copies),
                FoodCompositionTableReference(fct_id, fct_code),
            )
        ]

    if token in NEW_ACTIONS:
        return _new_foods(row, copies, recipes_only=False)

    if token in NEW_INGREDIENT_ACTIONS:
        return _new_foods(row, copies, recipes_only=True)

    if token in REPLACE_ACTIONS:
        food_code = row.required(FOOD_CODE)
        new_description = row.required(NEW_DESCRIPTION)
        fct_id = row.required(FCT_ID)
        new_fct_code = row.required(NEW_FCT_CODE)
        return [
            Include(
                food_code,
                new_description,
                tuple(copies),
                FoodCompositionTableReference(fct_id, new_fct_code),
            )
        ]

    if token in EXCLUDE_ACTIONS:
        return [NoAction()]

    raise unexpected_action_token(row, action)


def parse_table(stream: TextIO) -> Tuple[List[str], List[FoodAction]]:
    """Parse an NDNS sheet.

    Args:
        stream: CSV text with a header row

    Returns:
        Tuple of (errors, actions)
    """
    return parse_rows(stream, parse_row)
