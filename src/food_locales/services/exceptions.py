"""Service layer exception classes for the food locale tools.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── RowParseError
    ├── UnknownFormatError
    ├── LocaleNotFound
    ├── DeriveLocaleRejected
    ├── CodeGenerationExhausted
    ├── CopySourceMissing
    └── DuplicateFoodCodeError

Row parse errors and reference problems are collected as strings and only
become fatal as a whole, through DeriveLocaleRejected. Everything else
aborts the run immediately.
"""

from typing import Iterable, List, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class RowParseError(ServiceError):
    """Raised when a spreadsheet row is malformed.

    Parsers catch this per row and report str(error); it never escapes
    parse_table().

    Example:
        >>> raise RowParseError("Action (column G) is required in row 5 but the column is blank")
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownFormatError(ServiceError):
    """Raised when no spreadsheet parser is registered for a format id.

    Args:
        format_id: The requested format

    Example:
        >>> raise UnknownFormatError("xlsx9")
        UnknownFormatError: Unexpected format value: xlsx9
    """

    def __init__(self, format_id: str):
        self.format_id = format_id
        super().__init__(f"Unexpected format value: {format_id}")


class LocaleNotFound(ServiceError):
    """Raised when a locale id does not exist.

    Args:
        locale_id: The locale id that was not found
    """

    def __init__(self, locale_id: str):
        self.locale_id = locale_id
        super().__init__(f"Locale {locale_id} does not exist")


class DeriveLocaleRejected(ServiceError):
    """Raised when a derivation run is rejected before any database write.

    Args:
        errors: Ordered, human-readable problems for the uploader to fix

    Example:
        >>> raise DeriveLocaleRejected(["Unexpected action in row 3: keeep"])
        DeriveLocaleRejected: Locale derivation rejected: Unexpected action in row 3: keeep
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        error_msg = "; ".join(self.errors)
        super().__init__(f"Locale derivation rejected: {error_msg}")


class CodeGenerationExhausted(ServiceError):
    """Raised when no unique food code can be found within the attempt limit."""

    def __init__(self, message: str, last_code: Optional[str] = None):
        self.last_code = last_code
        super().__init__(message)


class CopySourceMissing(ServiceError):
    """Raised when foods are copied from codes that do not exist.

    Args:
        codes: The missing source codes
    """

    def __init__(self, codes: Iterable[str]):
        self.codes = sorted(codes)
        super().__init__(f"Invalid source food codes: {', '.join(self.codes)}")


class DuplicateFoodCodeError(ServiceError):
    """Raised when a food insert hits an existing code at commit time.

    This happens when a concurrent run claims the same generated code
    between the uniqueness check and the insert. The whole run has been
    rolled back; submitting it again picks fresh codes.

    Args:
        codes: Codes that were being inserted
        original_error: The underlying database exception
    """

    retryable = True

    def __init__(self, codes: Iterable[str], original_error: Exception = None):
        self.codes = sorted(codes)
        self.original_error = original_error
        super().__init__(
            f"Food code conflict while saving {', '.join(self.codes)}; "
            "another update claimed one of these codes. Please retry."
        )
