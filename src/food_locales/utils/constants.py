"""
Constants for the food locale administration tools.

This module defines all system-wide constants including:
- Application metadata
- Food code and description limits
- Spreadsheet parsing conventions
- Portion-size method vocabularies
"""

from typing import FrozenSet

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Food Locales"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "food_locales.db"

# ============================================================================
# Foods
# ============================================================================

MAX_FOOD_CODE_LENGTH = 8
MIN_FOOD_CODE_LENGTH = 4
FOOD_CODE_PADDING_CHAR = "X"
MAX_DESCRIPTION_LENGTH = 128

# Newly derived foods are all placed in this nutrient food group
DEFAULT_FOOD_GROUP_ID = 1

# foods_attributes.use_in_recipes
USE_AS_REGULAR_FOOD = 1
USE_AS_RECIPE_INGREDIENT = 2

# Both code deduplication loops give up after this many attempts
MAX_CODE_ATTEMPTS = 100

# ============================================================================
# Spreadsheet parsing
# ============================================================================

# Spreadsheet exports use these for "nothing here"
TREAT_AS_BLANK: FrozenSet[str] = frozenset({"0", "#N/A"})

# The header occupies the first spreadsheet line
HEADER_ROWS = 1

# ============================================================================
# Portion-size methods
# ============================================================================

PSM_AS_SERVED = "as-served"
PSM_GUIDE_IMAGE = "guide-image"
PSM_DRINK_SCALE = "drink-scale"
PSM_CEREAL = "cereal"
PSM_MILK_IN_HOT_DRINK = "milk-in-a-hot-drink"

PARAM_SERVING_IMAGE_SET = "serving-image-set"
PARAM_LEFTOVERS_IMAGE_SET = "leftovers-image-set"
PARAM_GUIDE_IMAGE_ID = "guide-image-id"
PARAM_DRINKWARE_ID = "drinkware-id"
PARAM_CEREAL_TYPE = "type"

LEFTOVERS_SUFFIX = "_leftovers"

CEREAL_TYPES: FrozenSet[str] = frozenset({"flake", "hoop", "rkris"})

DEFAULT_PSM_DESCRIPTION = "use_an_image"
DEFAULT_PSM_IMAGE_URL = "standard-portion.jpg"

# Category assigned to foods cloned as "milk in a hot drink"
MILK_IN_HOT_DRINK_CATEGORY = "MHDK"
