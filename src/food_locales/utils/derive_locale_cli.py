"""
Locale derivation CLI Utility

Command-line interface for building a locale from a curated spreadsheet.

Usage Examples:
    # Create the database tables
    food-locales init-db

    # Check a spreadsheet for row errors without touching the database
    food-locales check nz_foods.csv --format nz1

    # Build en_NZ from en_GB
    food-locales derive nz_foods.csv --format nz1 --source en_GB --dest en_NZ
"""

import argparse
import logging
import sys
from collections import Counter
from typing import List, Optional

from food_locales.services.database import initialize_app_database
from food_locales.services.derive_locale import (
    DeriveLocaleService,
    parse_file,
    supported_formats,
)
from food_locales.services.exceptions import DeriveLocaleRejected, ServiceError
from food_locales.utils.constants import APP_NAME, APP_VERSION


def init_db_cmd() -> int:
    """Create the database and its tables."""
    print("Initializing database...")
    initialize_app_database()
    print("Done")
    return 0


def check_cmd(input_file: str, format_id: str) -> int:
    """Parse a spreadsheet and report row errors."""
    print(f"Checking {input_file} (format: {format_id})...")

    try:
        errors, actions = parse_file(input_file, format_id)
    except (ServiceError, OSError, UnicodeDecodeError) as e:
        print(f"ERROR: {e}")
        return 1

    counts = Counter(type(action).__name__ for action in actions)
    print(f"Actions: {len(actions)}")
    for name in sorted(counts):
        print(f"  {name}: {counts[name]}")

    if errors:
        print(f"\n{len(errors)} row error(s):")
        for error in errors:
            print(f"  {error}")
        return 1

    print("No errors found")
    return 0


def derive_cmd(input_file: str, format_id: str, source_locale_id: str, dest_locale_id: str) -> int:
    """Apply a spreadsheet to the destination locale."""
    print(f"Deriving {dest_locale_id} from {source_locale_id} using {input_file}...")

    initialize_app_database()
    service = DeriveLocaleService()

    try:
        result = service.derive_locale_from_file(
            input_file, format_id, source_locale_id, dest_locale_id
        )
    except DeriveLocaleRejected as e:
        print(f"\nRejected with {len(e.errors)} error(s), nothing was saved:")
        for error in e.errors:
            print(f"  {error}")
        return 1
    except (ServiceError, OSError, UnicodeDecodeError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"\nLocale {result.dest_locale_id} updated")
    print(f"----------------{'-' * len(result.dest_locale_id)}")
    print(f"New foods: {result.created_count}")
    print(f"Copied foods: {result.copied_count}")
    print(f"Foods in locale list: {result.included_count}")
    if result.substitutions:
        print(f"Codes substituted: {len(result.substitutions)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    formats = supported_formats()

    parser = argparse.ArgumentParser(
        prog="food-locales",
        description=f"{APP_NAME} {APP_VERSION} - build locales from curated spreadsheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Supported spreadsheet formats: {', '.join(formats)}

Set FOOD_LOCALES_DATABASE_URL to use a database other than the default
SQLite file.
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create the database tables")

    check_parser = subparsers.add_parser("check", help="Check a spreadsheet for row errors")
    check_parser.add_argument("file", help="CSV file path")
    check_parser.add_argument(
        "-f", "--format", dest="format_id", choices=formats, required=True,
        help="Spreadsheet format",
    )

    derive_parser = subparsers.add_parser("derive", help="Build a locale from a spreadsheet")
    derive_parser.add_argument("file", help="CSV file path")
    derive_parser.add_argument(
        "-f", "--format", dest="format_id", choices=formats, required=True,
        help="Spreadsheet format",
    )
    derive_parser.add_argument(
        "-s", "--source", dest="source_locale", required=True, help="Source (template) locale id"
    )
    derive_parser.add_argument(
        "-d", "--dest", dest="dest_locale", required=True, help="Destination locale id"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "init-db":
        return init_db_cmd()
    elif args.command == "check":
        return check_cmd(args.file, args.format_id)
    elif args.command == "derive":
        return derive_cmd(args.file, args.format_id, args.source_locale, args.dest_locale)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
