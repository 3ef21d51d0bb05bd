"""Services package - Business logic layer for the food database.

Architecture:
- Services: Stateless functions organized by domain; the food store is a
  class so that a run can swap it out
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Reference checks before any database write

Service Modules:
- food_store: Bulk writes and reads of foods and local food data
- locale_service: Locale lookups
- category_service: Category lookups
- portion_size_service: Portion-size image and drinkware catalogs
- nutrient_table_service: Food composition table checks
- derive_locale: Locale spreadsheet parsing and derivation

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured logging helpers
- dto: Immutable value types passed to the food store

Modules are imported directly (``from food_locales.services import
locale_service``); this package does not import them eagerly because the
spreadsheet utilities depend on ``exceptions``.
"""
