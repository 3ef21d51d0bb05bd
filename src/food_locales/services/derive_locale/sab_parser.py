"""
Parser for South Asian Britain locale sheets (format "sab1").

Each row carries an English food plus up to seven community names, grouped
by language. Every non-empty group becomes one local description of the
form "Name one – Name two (English description)".

Column layout:
    A  Food code
    B  English description
    C  Action (keep/retain, new, delete/exclude)
    D-E  Indian names
    F-G  Sri Lankan names
    H-I  Pakistani names
    J  Bangladeshi name
    K  Food composition table
    L  Existing food composition code
    M  New food composition code
    N-W  Category codes
"""

from typing import List, Optional, Sequence, TextIO, Tuple

from food_locales.services.derive_locale.actions import FoodAction, Include, New, NoAction
from food_locales.services.derive_locale.parsing import (
    distinct,
    parse_rows,
    unexpected_action_token,
)
from food_locales.services.dto import FoodCompositionTableReference, FoodDescription
from food_locales.utils.spreadsheet_columns import SafeRowReader, column
from food_locales.utils.text_utils import capitalize_first

FORMAT_ID = "sab1"

FOOD_CODE = column("A", "Food code")
ENGLISH_DESCRIPTION = column("B", "Food description")
ACTION = column("C", "Action")
FCT_ID = column("K", "Food composition table ID")
CURRENT_FCT_CODE = column("L", "Existing food composition code")
NEW_FCT_CODE = column("M", "New food composition code")

LOCAL_NAME_GROUPS = (
    range(3, 5),  # Indian
    range(5, 7),  # Sri Lankan
    range(7, 9),  # Pakistani
    range(9, 10),  # Bangladeshi
)
CATEGORY_INDICES = range(13, 23)

LOCAL_NAME_SEPARATOR = " – "

KEEP_ACTIONS = {"keep", "retain"}
NEW_ACTIONS = {"new"}
DELETE_ACTIONS = {"delete", "exclude"}


def build_local_name(english_description: str, local_names: Sequence[str]) -> Optional[str]:
    """Join one community's names into a local description.

    Examples:
        >>> build_local_name("Chapati", ["roti", "phulka"])
        'Roti – Phulka (Chapati)'
        >>> build_local_name("Chapati", []) is None
        True
    """
    if not local_names:
        return None

    local_part = LOCAL_NAME_SEPARATOR.join(capitalize_first(name) for name in local_names)
    return f"{local_part} ({english_description})"


def _local_descriptions(row: SafeRowReader, english_description: str) -> List[FoodDescription]:
    descriptions = []
    for indices in LOCAL_NAME_GROUPS:
        local_name = build_local_name(english_description, row.collect_non_blank(indices))
        if local_name is not None:
            descriptions.append(FoodDescription(english_description, local_name))
    return descriptions


def parse_row(row: SafeRowReader) -> List[FoodAction]:
    """Parse one SAB row into actions.

    Raises:
        RowParseError: If a required cell is blank or the action is unknown
    """
    action = row.required(ACTION)
    english_description = row.required(ENGLISH_DESCRIPTION)
    token = action.lower()

    local_descriptions = _local_descriptions(row, english_description)

    if token in KEEP_ACTIONS:
        food_code = row.required(FOOD_CODE)
        fct_reference = FoodCompositionTableReference(
            row.required(FCT_ID), row.one_of(CURRENT_FCT_CODE, NEW_FCT_CODE)
        )

        if local_descriptions:
            first, alternatives = local_descriptions[0].local_description, local_descriptions[1:]
        else:
            first, alternatives = english_description, []

        return [Include(food_code, first, tuple(alternatives), fct_reference)]

    if token in NEW_ACTIONS:
        fct_reference = FoodCompositionTableReference(
            row.required(FCT_ID), row.one_of(CURRENT_FCT_CODE, NEW_FCT_CODE)
        )
        categories = distinct(row.collect_non_blank(CATEGORY_INDICES))

        # Plain English name only when no community name was given
        descriptions = local_descriptions or [
            FoodDescription(english_description, english_description)
        ]

        # One food per community description
        return [
            New(
                source_row=row.row_number,
                descriptions=(description,),
                categories=categories,
                fct_reference=fct_reference,
            )
            for description in descriptions
        ]

    if token in DELETE_ACTIONS:
        return [NoAction()]

    raise unexpected_action_token(row, action)


def parse_table(stream: TextIO) -> Tuple[List[str], List[FoodAction]]:
    """Parse a SAB sheet, returning (errors, actions)."""
    return parse_rows(stream, parse_row)
