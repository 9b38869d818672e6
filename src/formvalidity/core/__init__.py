"""
Core form-validity components.

This package provides the address scheme used to name nested and repeated
fields, and the type aliases shared by the other packages.
"""

from formvalidity.core.path_utils import (
    AddressComponents,
    format_address,
    last_segment,
    list_address,
    parent_address,
    parse_address,
    resolve,
    resolve_indexed,
    validate_key,
)
from formvalidity.core.types import Address, AddressSegment, FieldTree, FieldValue

__all__ = [
    "Address",
    "AddressSegment",
    "FieldTree",
    "FieldValue",
    "AddressComponents",
    "format_address",
    "last_segment",
    "list_address",
    "parent_address",
    "parse_address",
    "resolve",
    "resolve_indexed",
    "validate_key",
]
