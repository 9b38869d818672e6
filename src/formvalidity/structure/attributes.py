"""
Attributes produced for rendering.

``get_field_props`` turns one FieldConfig into the attributes the UI layer
renders: control attributes named by their address, or fieldset options
that a nested ``FieldsetBinding`` or ``ListController`` consumes.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from formvalidity.core.path_utils import resolve, resolve_indexed
from formvalidity.core.types import Address, FieldValue
from formvalidity.structure.field_config import (
    ControlConfig,
    FieldsetConfig,
    ListConfig,
)

# Option controls render one element per allowed value
GROUPED_TYPES = frozenset({"checkbox", "radio"})


@dataclass(frozen=True)
class ControlAttributes:
    """Attributes of one rendered control."""

    name: Address
    type: str = "text"
    required: bool = False
    multiple: bool = False
    min_length: int | None = None
    max_length: int | None = None
    min: str | int | float | None = None
    max: str | int | float | None = None
    step: str | int | float | None = None
    pattern: str | None = None
    options: tuple[str, ...] | None = None
    default_value: FieldValue = None
    value: str | None = None
    default_checked: bool | None = None

    def as_attributes(self) -> dict[str, Any]:
        """Return the attributes under their markup names, omitting unset ones."""
        wire = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "multiple": self.multiple,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "pattern": self.pattern,
            "defaultValue": self.default_value,
            "value": self.value,
            "defaultChecked": self.default_checked,
        }
        return {
            key: value
            for key, value in wire.items()
            if value is not None and value is not False
        }


@dataclass
class FieldsetOptions:
    """Name, initial value and initial errors handed to a nested fieldset."""

    name: Address = ""
    value: Mapping[str, Any] | None = None
    error: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class ButtonAttributes:
    """Attributes of a structural submit button."""

    name: str
    value: str
    type: str = "submit"
    form_no_validate: bool = True
    on_click: Callable[[Any], None] | None = field(default=None, compare=False)

    def as_attributes(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "value": self.value,
            "formNoValidate": self.form_no_validate,
        }


@dataclass(frozen=True)
class FormAttributes:
    """Attributes and handlers of the form element itself."""

    no_validate: bool
    on_blur: Callable[[Any], None]
    on_change: Callable[[Any], None]
    on_submit: Callable[[Any], None]
    on_reset: Callable[[Any], None]


FieldProps = ControlAttributes | list[ControlAttributes] | FieldsetOptions | list[FieldsetOptions]


def _lookup(container: Any, key: str | int) -> Any:
    if isinstance(container, Mapping):
        return container.get(key)
    if isinstance(container, list | tuple) and isinstance(key, int):
        return container[key] if key < len(container) else None
    return None


def get_field_props(
    config: ControlConfig | FieldsetConfig | ListConfig,
    key: str,
    name: Address = "",
    value: Mapping[str, Any] | None = None,
    error: Mapping[str, Any] | None = None,
) -> FieldProps:
    """
    Produce render attributes for one field of a fieldset.

    Params:
        config: Normalized configuration of the field
        key: Field key within its fieldset
        name: Address of the enclosing fieldset, empty at the root
        value: Initial values of the enclosing fieldset
        error: Initial error messages of the enclosing fieldset

    Returns:
        ``ControlAttributes`` for a control, one ``ControlAttributes`` per
        option for checkbox and radio groups, ``FieldsetOptions`` for a
        fieldset, and one ``FieldsetOptions`` per element for a list
    """
    address = resolve(name, key)
    field_value = _lookup(value, key)
    field_error = _lookup(error, key)

    if isinstance(config, FieldsetConfig):
        return FieldsetOptions(name=address, value=field_value, error=field_error)

    if isinstance(config, ListConfig):
        if config.count is not None:
            size = config.count
        else:
            size = len(field_value) if isinstance(field_value, list | tuple) else 0
        return [
            FieldsetOptions(
                name=resolve_indexed(address, index),
                value=_lookup(field_value, index),
                error=_lookup(field_error, index),
            )
            for index in range(size)
        ]

    attributes = ControlAttributes(
        name=address,
        type=config.input_type,
        required=config.required is not None and bool(config.required.value),
        multiple=config.multiple,
        min_length=config.min_length.value if config.min_length else None,
        max_length=config.max_length.value if config.max_length else None,
        min=config.min.value if config.min else None,
        max=config.max.value if config.max else None,
        step=config.step.value if config.step else None,
        pattern=config.pattern.value if config.pattern else None,
        options=config.options if config.input_type == "select" else None,
        default_value=field_value,
    )

    if config.options is None or config.input_type not in GROUPED_TYPES:
        return attributes

    return [
        replace(
            attributes,
            default_value=None,
            value=option,
            default_checked=(
                option in field_value
                if isinstance(field_value, list | tuple)
                else field_value == option
            ),
        )
        for option in config.options
    ]
