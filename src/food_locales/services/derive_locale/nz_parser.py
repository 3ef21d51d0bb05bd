"""
Parser for New Zealand locale sheets (format "nz1").

Column layout (unlisted columns are ignored):
    A  Food code
    C  Local description
    D  FCT table
    E  FCT code
    Y  Revised local description
    Z  Action (new, retain, revise, exclude)
    AA Reference food (source of a "new" row)
    AB Use as milk in hot drink

Any non-blank value in AB adds an extra food to the MHDK category with the
milk-in-a-hot-drink portion-size method.
"""

from typing import List, Optional, TextIO, Tuple

from food_locales.services.derive_locale.actions import Clone, FoodAction, Include, New, NoAction
from food_locales.services.derive_locale.parsing import (
    optional_fct_reference,
    parse_rows,
    unexpected_action_token,
)
from food_locales.services.dto import (
    FoodCompositionTableReference,
    FoodDescription,
    PortionSizeMethod,
)
from food_locales.services.exceptions import RowParseError
from food_locales.utils.constants import MILK_IN_HOT_DRINK_CATEGORY, PSM_MILK_IN_HOT_DRINK
from food_locales.utils.spreadsheet_columns import SafeRowReader, column

FORMAT_ID = "nz1"

FOOD_CODE = column("A", "Intake24 code")
LOCAL_DESCRIPTION = column("C", "Local description")
FCT_ID = column("D", "FCT table")
FCT_CODE = column("E", "FCT code")
REVISED_LOCAL_DESCRIPTION = column("Y", "Revised local description")
ACTION = column("Z", "Action")
SOURCE_FOOD_CODE = column("AA", "Reference food")
MILK_IN_HOT_DRINK = column("AB", "Use as milk in hot drink")

MILK_IN_HOT_DRINK_METHOD = PortionSizeMethod(
    PSM_MILK_IN_HOT_DRINK, "in_a_mug", "portion/mugs.jpg", False, 1.0, ()
)


def milk_in_hot_drink(
    row: SafeRowReader,
    local_description: str,
    fct_reference: Optional[FoodCompositionTableReference],
) -> New:
    """Build the extra MHDK food for a flagged row.

    Raises:
        RowParseError: If the row has no FCT reference
    """
    if fct_reference is None:
        raise RowParseError(
            "Food composition table reference required for milk in hot drink "
            f"records (row {row.row_number})"
        )

    return New(
        source_row=row.row_number,
        descriptions=(FoodDescription(local_description, local_description),),
        categories=(MILK_IN_HOT_DRINK_CATEGORY,),
        fct_reference=fct_reference,
        recipes_only=False,
        portion_size_methods=(MILK_IN_HOT_DRINK_METHOD,),
    )


def parse_row(row: SafeRowReader) -> List[FoodAction]:
    """Parse one NZ row into actions.

    Raises:
        RowParseError: If a required cell is blank or the action is unknown
    """
    action = row.required(ACTION)
    token = action.lower()

    if token == "exclude":
        return [NoAction()]

    if token == "new":
        local_description = row.required(LOCAL_DESCRIPTION)
        source_code = row.required(SOURCE_FOOD_CODE)
        fct_reference = optional_fct_reference(row.optional(FCT_ID), row.optional(FCT_CODE))
        actions: List[FoodAction] = [
            Clone(
                row.row_number,
                source_code,
                FoodDescription(local_description, local_description),
                fct_reference,
            )
        ]
    elif token == "retain":
        food_code = row.required(FOOD_CODE)
        local_description = row.required(LOCAL_DESCRIPTION)
        fct_reference = optional_fct_reference(row.optional(FCT_ID), row.optional(FCT_CODE))
        actions = [Include(food_code, local_description, (), fct_reference)]
    elif token == "revise":
        food_code = row.required(FOOD_CODE)
        local_description = row.required(REVISED_LOCAL_DESCRIPTION)
        fct_reference = FoodCompositionTableReference(row.required(FCT_ID), row.required(FCT_CODE))
        actions = [Include(food_code, local_description, (), fct_reference)]
    else:
        raise unexpected_action_token(row, action)

    if row.optional(MILK_IN_HOT_DRINK) is not None:
        actions.append(milk_in_hot_drink(row, local_description, fct_reference))

    return actions


def parse_table(stream: TextIO) -> Tuple[List[str], List[FoodAction]]:
    """Parse an NZ sheet, returning (errors, actions)."""
    return parse_rows(stream, parse_row)
