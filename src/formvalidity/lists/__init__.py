"""
Dynamic lists of fieldsets.

This package provides the structural directive codec and the controller
that keeps stable keys for the elements of a list.
"""

from formvalidity.lists.controller import ListController, ListItem
from formvalidity.lists.directive import (
    Insert,
    Remove,
    StructuralAction,
    decode_directive,
    draft_update,
    encode_directive,
    should_skip_validate,
)

__all__ = [
    "Insert",
    "Remove",
    "StructuralAction",
    "encode_directive",
    "decode_directive",
    "draft_update",
    "should_skip_validate",
    "ListController",
    "ListItem",
]
