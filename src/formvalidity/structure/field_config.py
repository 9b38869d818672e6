"""
Normalized field configuration model.

A field description handed over by the schema layer is normalized into one
of three frozen pydantic models, selected by ``kind``:

- ``ControlConfig`` for a single control and its constraint attributes
- ``FieldsetConfig`` for a nested group of fields
- ``ListConfig`` for a repeated group, fixed-size when ``count`` is set

Constraint attributes are coerced to their comparison-ready representation
at this point (date bounds become ISO strings, compiled patterns become their
source), and any malformed description fails here rather than at
validation time.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from formvalidity.core.path_utils import validate_key
from formvalidity.core.types import FieldTree
from formvalidity.exceptions import FieldConfigError, PathValidationError

ConstraintValue = bool | int | float | str

ENUMERABLE_TYPES = frozenset({"checkbox", "radio", "select"})


class FieldKind(str, Enum):
    """Kinds of addressable units in a field tree."""

    CONTROL = "control"
    FIELDSET = "fieldset"
    LIST_OF_FIELDSET = "list-of-fieldset"


class Constraint(BaseModel):
    """One constraint attribute with an optional custom violation message."""

    model_config = ConfigDict(frozen=True)

    value: ConstraintValue
    message: str | None = None


def _to_constraint(raw: Any) -> Any:
    if raw is None or isinstance(raw, Constraint | Mapping):
        return raw
    if isinstance(raw, tuple):
        if len(raw) != 2:
            raise ValueError("constraint tuple must be (value, message)")
        return {"value": raw[0], "message": raw[1]}
    return {"value": raw}


def _normalize_bound(raw: Any) -> Any:
    # datetime is a date subclass, both expose isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    return raw


class ControlConfig(BaseModel):
    """Configuration of a single control."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    kind: Literal["control"] = "control"
    type: Constraint = Constraint(value="text")
    required: Constraint | None = None
    multiple: bool = False
    min_length: Constraint | None = Field(default=None, alias="minLength")
    max_length: Constraint | None = Field(default=None, alias="maxLength")
    min: Constraint | None = None
    max: Constraint | None = None
    step: Constraint | None = None
    pattern: Constraint | None = None
    options: tuple[str, ...] | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, raw: Any) -> Any:
        return _to_constraint(raw)

    @field_validator("required", mode="before")
    @classmethod
    def _coerce_required(cls, raw: Any) -> Any:
        # required=True, required="custom message" or required=False
        if raw is False:
            return None
        if isinstance(raw, str):
            return {"value": True, "message": raw}
        return _to_constraint(raw)

    @field_validator("min_length", "max_length", "step", mode="before")
    @classmethod
    def _coerce_constraint(cls, raw: Any) -> Any:
        return _to_constraint(raw)

    @field_validator("min", "max", mode="before")
    @classmethod
    def _coerce_bound(cls, raw: Any) -> Any:
        if isinstance(raw, tuple) and len(raw) == 2:
            raw = (_normalize_bound(raw[0]), raw[1])
        elif isinstance(raw, Mapping) and "value" in raw:
            raw = {**raw, "value": _normalize_bound(raw["value"])}
        else:
            raw = _normalize_bound(raw)
        return _to_constraint(raw)

    @field_validator("pattern", mode="before")
    @classmethod
    def _coerce_pattern(cls, raw: Any) -> Any:
        if isinstance(raw, tuple) and len(raw) == 2 and isinstance(raw[0], re.Pattern):
            raw = (raw[0].pattern, raw[1])
        elif isinstance(raw, re.Pattern):
            raw = raw.pattern
        return _to_constraint(raw)

    @model_validator(mode="after")
    def _check_constraints(self) -> "ControlConfig":
        if self.options is not None and self.input_type not in ENUMERABLE_TYPES:
            raise ValueError(
                f"options are only allowed on {sorted(ENUMERABLE_TYPES)} controls"
            )

        for name in ("min_length", "max_length"):
            constraint = getattr(self, name)
            if constraint is None:
                continue
            value = constraint.value
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")

        if self.min_length and self.max_length:
            if self.min_length.value > self.max_length.value:
                raise ValueError("min_length cannot exceed max_length")

        if self.step is not None and self.step.value != "any":
            value = self.step.value
            if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
                raise ValueError("step must be a positive number or 'any'")

        if self.pattern is not None:
            if not isinstance(self.pattern.value, str):
                raise ValueError("pattern must be a string")
            try:
                re.compile(self.pattern.value)
            except re.error as e:
                raise ValueError(f"pattern does not compile: {e}") from e

        return self

    @property
    def input_type(self) -> str:
        return str(self.type.value)


def _with_default_kind(description: Any) -> Any:
    if isinstance(description, Mapping) and "kind" not in description:
        return {**description, "kind": FieldKind.CONTROL.value}
    if isinstance(description, Mapping) and isinstance(description["kind"], FieldKind):
        return {**description, "kind": description["kind"].value}
    return description


class _GroupConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    fields: dict[str, "FieldConfig"] = Field(default_factory=dict)

    @field_validator("fields", mode="before")
    @classmethod
    def _coerce_fields(cls, raw: Any) -> Any:
        if not isinstance(raw, Mapping):
            raise ValueError("fields must be a mapping of key to field description")
        for key in raw:
            try:
                validate_key(key)
            except PathValidationError as e:
                raise ValueError(str(e)) from e
        return {key: _with_default_kind(value) for key, value in raw.items()}


class FieldsetConfig(_GroupConfig):
    """Configuration of a nested group of fields."""

    kind: Literal["fieldset"] = "fieldset"


class ListConfig(_GroupConfig):
    """Configuration of a repeated group of fields.

    ``count`` fixes the number of elements; without it the size is driven by
    a list controller.
    """

    kind: Literal["list-of-fieldset"] = "list-of-fieldset"
    count: StrictInt | None = Field(default=None, ge=0)


FieldConfig = Annotated[
    Union[ControlConfig, FieldsetConfig, ListConfig], Field(discriminator="kind")
]

FieldsetConfig.model_rebuild()
ListConfig.model_rebuild()

_field_config_adapter: TypeAdapter = TypeAdapter(FieldConfig)


def _summarize(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        parts.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(parts)


def get_field_config(field: Any, key: str = "<root>") -> ControlConfig | FieldsetConfig | ListConfig:
    """
    Normalize a field description into a FieldConfig.

    Params:
        field: A FieldConfig instance, or a mapping describing one. ``kind``
            defaults to ``"control"``; constraint values may be given bare, as
            ``(value, message)`` tuples or as ``{"value", "message"}`` mappings
        key: Field key used for error reporting

    Returns:
        The normalized, frozen FieldConfig

    Raises:
        FieldConfigError: If the description is malformed
    """
    if isinstance(field, ControlConfig | FieldsetConfig | ListConfig):
        return field
    if not isinstance(field, Mapping):
        raise FieldConfigError(key, f"expected a mapping, got {type(field).__name__}")

    try:
        return _field_config_adapter.validate_python(_with_default_kind(field))
    except ValidationError as e:
        raise FieldConfigError(key, _summarize(e)) from e


def normalize_field_tree(tree: FieldTree) -> dict[str, ControlConfig | FieldsetConfig | ListConfig]:
    """
    Normalize every entry of a field tree.

    The caller's mapping is read, never mutated.

    Params:
        tree: Mapping of field key to field description

    Returns:
        New mapping of field key to FieldConfig

    Raises:
        FieldConfigError: If any key or description is malformed
    """
    normalized = {}
    for key, field in tree.items():
        try:
            validate_key(key)
        except PathValidationError as e:
            raise FieldConfigError(str(key), e.reason) from e
        normalized[key] = get_field_config(field, key)
    return normalized
