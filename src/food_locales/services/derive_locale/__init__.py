"""
Locale derivation (building a locale from a curated spreadsheet).

This package provides:
- Spreadsheet parsers for the ndns1, sab1 and nz1 formats
- The canonical FoodAction model every parser produces
- Food code generation and deduplication
- Portion-size reference validation
- DeriveLocaleService, which validates and commits a run

Usage:
    from food_locales.services.derive_locale import (
        DeriveLocaleService,
        get_parser,
    )

    errors, actions = get_parser("nz1")(stream)
    result = DeriveLocaleService().derive_locale("en_GB", "en_NZ", actions, errors)
"""

from food_locales.services.derive_locale.actions import (
    Clone,
    FoodAction,
    Include,
    New,
    NoAction,
    unexpected_action,
)
from food_locales.services.derive_locale.derive_locale_service import (
    DerivationState,
    DeriveLocaleResult,
    DeriveLocaleService,
    parse_file,
)
from food_locales.services.derive_locale.parsers import get_parser, supported_formats

__all__ = [
    # Actions
    "Clone",
    "FoodAction",
    "Include",
    "New",
    "NoAction",
    "unexpected_action",
    # Service
    "DerivationState",
    "DeriveLocaleResult",
    "DeriveLocaleService",
    "parse_file",
    # Parsers
    "get_parser",
    "supported_formats",
]
