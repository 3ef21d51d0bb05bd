"""Data Transfer Objects for the food store.

This module provides the immutable value types passed between the locale
derivation engine and the food store: references into food composition
tables, portion-size methods, and the create/copy requests for foods and
local food data.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from food_locales.utils.constants import (
    DEFAULT_PSM_DESCRIPTION,
    DEFAULT_PSM_IMAGE_URL,
    PARAM_GUIDE_IMAGE_ID,
    PARAM_LEFTOVERS_IMAGE_SET,
    PARAM_SERVING_IMAGE_SET,
    PSM_AS_SERVED,
    PSM_GUIDE_IMAGE,
)


@dataclass(frozen=True)
class FoodCompositionTableReference:
    """Pointer to one record in a food composition table.

    Attributes:
        table_id: Food composition table (e.g. "NDNS")
        record_id: Record within that table
    """

    table_id: str
    record_id: str


@dataclass(frozen=True)
class FoodDescription:
    """English and local description of one food."""

    english_description: str
    local_description: str


@dataclass(frozen=True)
class PortionSizeMethodParameter:
    """Named parameter of a portion-size method."""

    name: str
    value: str


@dataclass(frozen=True)
class PortionSizeMethod:
    """Portion-size estimation method.

    Attributes:
        method: Method kind ("as-served", "guide-image", ...)
        description: Label shown to the respondent
        image_url: Thumbnail for the method selection screen
        use_for_recipes: Offer this method when the food is a recipe ingredient
        conversion_factor: Multiplier applied to the estimated weight
        parameters: Method parameters, in order

    Examples:
        >>> PortionSizeMethod.as_served("apples").parameter("serving-image-set")
        'apples'
        >>> PortionSizeMethod.guide_image("bread").parameter("leftovers-image-set") is None
        True
    """

    method: str
    description: str
    image_url: str
    use_for_recipes: bool
    conversion_factor: float
    parameters: Tuple[PortionSizeMethodParameter, ...] = ()

    @classmethod
    def guide_image(
        cls,
        guide_image_id: str,
        description: str = DEFAULT_PSM_DESCRIPTION,
        use_for_recipes: bool = True,
        conversion_factor: float = 1.0,
    ) -> "PortionSizeMethod":
        """Build a guide-image method."""
        return cls(
            PSM_GUIDE_IMAGE,
            description,
            DEFAULT_PSM_IMAGE_URL,
            use_for_recipes,
            conversion_factor,
            (PortionSizeMethodParameter(PARAM_GUIDE_IMAGE_ID, guide_image_id),),
        )

    @classmethod
    def as_served(
        cls,
        serving_set_id: str,
        leftovers_set_id: Optional[str] = None,
        description: str = DEFAULT_PSM_DESCRIPTION,
        use_for_recipes: bool = True,
        conversion_factor: float = 1.0,
    ) -> "PortionSizeMethod":
        """Build an as-served method, optionally with a leftovers image set."""
        params = [PortionSizeMethodParameter(PARAM_SERVING_IMAGE_SET, serving_set_id)]
        if leftovers_set_id is not None:
            params.append(PortionSizeMethodParameter(PARAM_LEFTOVERS_IMAGE_SET, leftovers_set_id))

        return cls(
            PSM_AS_SERVED,
            description,
            DEFAULT_PSM_IMAGE_URL,
            use_for_recipes,
            conversion_factor,
            tuple(params),
        )

    def parameter(self, name: str) -> Optional[str]:
        """Return the value of the first parameter called name, or None."""
        for param in self.parameters:
            if param.name == name:
                return param.value
        return None

    def with_parameter(self, name: str, value: str) -> "PortionSizeMethod":
        """Return a copy with one more parameter appended."""
        return replace(self, parameters=self.parameters + (PortionSizeMethodParameter(name, value),))


@dataclass(frozen=True)
class AssociatedFood:
    """Associated food prompt; exactly one of food_code / category_code is set."""

    prompt_text: str
    link_as_main: bool
    generic_name: str
    food_code: Optional[str] = None
    category_code: Optional[str] = None


@dataclass(frozen=True)
class InheritableAttributes:
    """Food attributes; None means "inherit from the categories"."""

    ready_meal_option: Optional[bool] = None
    same_as_before_option: Optional[bool] = None
    reasonable_amount: Optional[int] = None
    use_in_recipes: Optional[int] = None


@dataclass(frozen=True)
class NewFood:
    """Request to create a global food record."""

    code: str
    english_description: str
    food_group_id: int
    attributes: InheritableAttributes = field(default_factory=InheritableAttributes)
    categories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NewLocalFood:
    """Request to create (or replace) local data for a food in one locale."""

    code: str
    local_description: Optional[str]
    nutrient_table_codes: Tuple[FoodCompositionTableReference, ...] = ()
    portion_size_methods: Tuple[PortionSizeMethod, ...] = ()
    associated_foods: Tuple[AssociatedFood, ...] = ()
    brand_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CopyFood:
    """Request to copy a global food record under a new code."""

    source_code: str
    new_code: str
    new_description: str


@dataclass(frozen=True)
class CopyLocalFood:
    """Request to copy local data from one (code, locale) to another.

    Attributes:
        source_code: Food whose local data is copied from the source locale
        dest_code: Food receiving the data in the destination locale
        local_description: Replaces the copied local description
        fct_reference: If set, replaces the copied nutrient mapping
    """

    source_code: str
    dest_code: str
    local_description: str
    fct_reference: Optional[FoodCompositionTableReference] = None
