"""Checks portion-size methods against the image and drinkware catalogs.

Problems are returned as strings rather than raised so that one upload can
report every broken reference at once.
"""

from typing import AbstractSet, List, Sequence, Tuple

from food_locales.services.dto import PortionSizeMethod
from food_locales.utils.constants import (
    CEREAL_TYPES,
    LEFTOVERS_SUFFIX,
    PARAM_CEREAL_TYPE,
    PARAM_DRINKWARE_ID,
    PARAM_GUIDE_IMAGE_ID,
    PARAM_LEFTOVERS_IMAGE_SET,
    PARAM_SERVING_IMAGE_SET,
    PSM_AS_SERVED,
    PSM_CEREAL,
    PSM_DRINK_SCALE,
    PSM_GUIDE_IMAGE,
)


def _check_reference(
    method: PortionSizeMethod,
    kind: str,
    param_name: str,
    valid_ids: AbstractSet[str],
    not_found: str,
) -> List[str]:
    value = method.parameter(param_name)

    if value is None:
        return [f'{kind} method is missing the "{param_name}" parameter']

    if value not in valid_ids:
        return [not_found.format(value)]

    return []


def validate_portion_size_method(
    method: PortionSizeMethod,
    as_served_ids: AbstractSet[str],
    guide_image_ids: AbstractSet[str],
    drinkware_ids: AbstractSet[str],
) -> List[str]:
    """Validate one method; unknown method kinds are not checked."""
    if method.method == PSM_AS_SERVED:
        return _check_reference(
            method, "As served", PARAM_SERVING_IMAGE_SET, as_served_ids,
            'As served set "{}" does not exist',
        )

    if method.method == PSM_GUIDE_IMAGE:
        return _check_reference(
            method, "Guide image", PARAM_GUIDE_IMAGE_ID, guide_image_ids,
            'Guide image "{}" does not exist',
        )

    if method.method == PSM_DRINK_SCALE:
        return _check_reference(
            method, "Drink scale", PARAM_DRINKWARE_ID, drinkware_ids,
            'Drink scale "{}" does not exist',
        )

    if method.method == PSM_CEREAL:
        return _check_reference(
            method, "Cereal", PARAM_CEREAL_TYPE, CEREAL_TYPES,
            'Cereal type "{}" does not exist',
        )

    return []


def validate_portion_size_methods(
    methods: Sequence[PortionSizeMethod],
    as_served_ids: AbstractSet[str],
    guide_image_ids: AbstractSet[str],
    drinkware_ids: AbstractSet[str],
) -> List[str]:
    """
    Validate every method of a food.

    Args:
        methods: Portion-size methods to check
        as_served_ids: Known as-served image set ids
        guide_image_ids: Known guide image ids
        drinkware_ids: Known drinkware set ids

    Returns:
        Problems in method order, empty if all references resolve
    """
    errors = []
    for method in methods:
        errors.extend(
            validate_portion_size_method(method, as_served_ids, guide_image_ids, drinkware_ids)
        )
    return errors


def add_as_served_leftovers(
    methods: Sequence[PortionSizeMethod],
    as_served_ids: AbstractSet[str],
) -> Tuple[PortionSizeMethod, ...]:
    """
    Attach leftovers image sets to as-served methods where one exists.

    For a serving set "chips" the leftovers set is "chips_leftovers". An
    explicitly supplied leftovers parameter is never replaced.

    Examples:
        >>> m = PortionSizeMethod.as_served("chips")
        >>> add_as_served_leftovers([m], {"chips", "chips_leftovers"})[0].parameter("leftovers-image-set")
        'chips_leftovers'
    """
    result = []

    for method in methods:
        if method.method == PSM_AS_SERVED and method.parameter(PARAM_LEFTOVERS_IMAGE_SET) is None:
            serving_set = method.parameter(PARAM_SERVING_IMAGE_SET)
            if serving_set is not None:
                leftovers_set = serving_set + LEFTOVERS_SUFFIX
                if leftovers_set in as_served_ids:
                    method = method.with_parameter(PARAM_LEFTOVERS_IMAGE_SET, leftovers_set)
        result.append(method)

    return tuple(result)
