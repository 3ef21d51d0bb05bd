"""Food Locales - locale derivation tools for a multi-country food database."""

from food_locales.utils.constants import APP_VERSION

__version__ = APP_VERSION
