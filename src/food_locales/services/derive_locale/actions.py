"""Canonical food actions produced by the locale spreadsheet parsers.

Every spreadsheet dialect is reduced to a list of these four actions,
which are the only input the derivation service accepts:

- Include: keep an existing food in the destination locale, optionally
  with stamped copies under new codes
- New: create brand-new foods
- Clone: copy an existing food under a new code
- NoAction: the row was deliberately excluded

The set is closed. Code that consumes actions handles all four and calls
unexpected_action() for anything else.
"""

from dataclasses import dataclass
from typing import NoReturn, Optional, Tuple, Union

from food_locales.services.dto import (
    FoodCompositionTableReference,
    FoodDescription,
    PortionSizeMethod,
)


@dataclass(frozen=True)
class Include:
    """Reuse an existing food in the destination locale.

    Attributes:
        food_code: Existing food code
        local_description: Description in the destination locale
        copies: Extra foods to create by copying this one, one per description
        fct_reference: Replacement nutrient mapping, if any
    """

    food_code: str
    local_description: str
    copies: Tuple[FoodDescription, ...] = ()
    fct_reference: Optional[FoodCompositionTableReference] = None


@dataclass(frozen=True)
class New:
    """Create new foods, one per description.

    Attributes:
        source_row: Spreadsheet row the action came from (for messages)
        descriptions: Foods to create
        categories: Category codes for every created food
        fct_reference: Nutrient mapping for every created food
        recipes_only: Restrict the foods to recipe ingredients
        portion_size_methods: Portion-size methods for every created food
    """

    source_row: int
    descriptions: Tuple[FoodDescription, ...]
    categories: Tuple[str, ...]
    fct_reference: FoodCompositionTableReference
    recipes_only: bool = False
    portion_size_methods: Tuple[PortionSizeMethod, ...] = ()


@dataclass(frozen=True)
class Clone:
    """Copy an existing food, with all of its local data, under a new code."""

    source_row: int
    source_code: str
    description: FoodDescription
    fct_reference: Optional[FoodCompositionTableReference] = None


@dataclass(frozen=True)
class NoAction:
    """Row excluded from the destination locale."""


FoodAction = Union[Include, New, Clone, NoAction]


def unexpected_action(action: object) -> NoReturn:
    """Fail on a value outside the FoodAction union."""
    raise TypeError(f"Unexpected food action: {action!r}")
