"""
form-validity structure components.

This package provides the normalized field configuration model and the
attributes produced from it for rendering.
"""

from formvalidity.structure.attributes import (
    ButtonAttributes,
    ControlAttributes,
    FieldProps,
    FieldsetOptions,
    FormAttributes,
    get_field_props,
)
from formvalidity.structure.field_config import (
    Constraint,
    ControlConfig,
    FieldConfig,
    FieldKind,
    FieldsetConfig,
    ListConfig,
    get_field_config,
    normalize_field_tree,
)

__all__ = [
    "FieldKind",
    "Constraint",
    "ControlConfig",
    "FieldsetConfig",
    "ListConfig",
    "FieldConfig",
    "get_field_config",
    "normalize_field_tree",
    "ControlAttributes",
    "FieldsetOptions",
    "ButtonAttributes",
    "FormAttributes",
    "FieldProps",
    "get_field_props",
]
