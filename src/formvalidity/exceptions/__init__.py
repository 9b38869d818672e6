"""
form-validity exception classes.

This package provides all exception types used throughout form-validity
for consistent error handling and reporting.
"""

from formvalidity.exceptions.core import (
    DirectiveError,
    DuplicateAddressError,
    FieldConfigError,
    FormValidityError,
    ListNameConflictError,
    PathValidationError,
)

__all__ = [
    "FormValidityError",
    "FieldConfigError",
    "PathValidationError",
    "ListNameConflictError",
    "DuplicateAddressError",
    "DirectiveError",
]
