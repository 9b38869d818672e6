"""
Settings for form-validity.

A settings object is handed to each ``FormScope``; collaborators read it
from the scope rather than from module state.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formvalidity.validity.flags import ValidityFlag

_ADDRESS_CHARS = frozenset(".[]:")


class FormValiditySettings(BaseModel):
    """Per-form configuration.

    Params:
        directive_name: Reserved field name carrying structural directives
        initial_no_validate: ``noValidate`` of the form before it is mounted
        messages: Overrides of the platform's default message per flag
    """

    model_config = ConfigDict(frozen=True)

    directive_name: str = "__form-validity__"
    initial_no_validate: bool = False
    messages: dict[ValidityFlag, str] = Field(default_factory=dict)

    @field_validator("directive_name")
    @classmethod
    def _check_directive_name(cls, value: str) -> str:
        if not value.startswith("__") or len(value) <= 2:
            raise ValueError("directive name must start with '__' and be non-empty")
        if _ADDRESS_CHARS.intersection(value):
            raise ValueError("directive name cannot contain '.', '[', ']' or ':'")
        return value


DEFAULT_SETTINGS = FormValiditySettings()
