"""
Fieldset binding.

Binds one level of a field tree to live controls: produces the attributes
each field renders with, tracks the message of every control field and turns
the controls' validity notifications into messages through the message
synthesizer.
"""

import logging
from collections.abc import Mapping
from typing import Any

from formvalidity.controls import Control, ControlEvent, Form
from formvalidity.core.path_utils import last_segment, resolve
from formvalidity.core.types import Address, FieldTree
from formvalidity.exceptions import FieldConfigError, PathValidationError
from formvalidity.form.scope import FormScope
from formvalidity.lists.controller import ListController
from formvalidity.structure.attributes import (
    FieldProps,
    FieldsetOptions,
    get_field_props,
)
from formvalidity.structure.field_config import (
    ControlConfig,
    FieldsetConfig,
    ListConfig,
    normalize_field_tree,
)
from formvalidity.validity.bindings import ControlBinding
from formvalidity.validity.messages import synthesize_message

logger = logging.getLogger(__name__)


def _initial_message(error: Any) -> str:
    return error if isinstance(error, str) else ""


class FieldsetBinding:
    """Binding of one fieldset level to the controls rendered for it.

    Params:
        scope: Scope of the enclosing form
        fieldset: Mapping of field key to field description or FieldConfig
        options: Address, initial values and initial errors of this fieldset;
            the form root when omitted

    Raises:
        FieldConfigError: If any field description is malformed
    """

    def __init__(
        self,
        scope: FormScope,
        fieldset: FieldTree,
        options: FieldsetOptions | None = None,
    ):
        options = options or FieldsetOptions()
        self.scope = scope
        self.name: Address = options.name
        self.value: Mapping[str, Any] = options.value or {}
        self.error: Mapping[str, Any] = options.error or {}
        self._fieldset = normalize_field_tree(fieldset)
        self._initial_errors = {
            key: _initial_message(self.error.get(key)) for key in self._control_keys()
        }
        self.fields: dict[str, FieldProps] = self._build_fields()

    @property
    def config(self) -> dict[str, ControlConfig | FieldsetConfig | ListConfig]:
        return dict(self._fieldset)

    def address_of(self, key: str) -> Address:
        return resolve(self.name, key)

    def _control_keys(self) -> list[str]:
        return [
            key for key, config in self._fieldset.items() if isinstance(config, ControlConfig)
        ]

    def _build_fields(self) -> dict[str, FieldProps]:
        return {
            key: get_field_props(config, key, self.name, self.value, self.error)
            for key, config in self._fieldset.items()
        }

    @property
    def errors(self) -> dict[str, str]:
        """Current message per control field, empty string when valid."""
        errors = {}
        for key in self._control_keys():
            binding = self.scope.bindings.get(self.address_of(key))
            errors[key] = binding.message if binding else self._initial_errors.get(key, "")
        return errors

    # Nested levels

    def nested(self, key: str) -> "FieldsetBinding":
        """Binding for a nested fieldset field."""
        config = self._fieldset.get(key)
        if not isinstance(config, FieldsetConfig):
            raise FieldConfigError(self.address_of(key), "not a fieldset")
        return FieldsetBinding(self.scope, config.fields, self.fields[key])

    def element(self, key: str, index: int) -> "FieldsetBinding":
        """Binding for one element of a list field."""
        config = self._fieldset.get(key)
        if not isinstance(config, ListConfig):
            raise FieldConfigError(self.address_of(key), "not a list of fieldsets")
        return FieldsetBinding(self.scope, config.fields, self.fields[key][index])

    def list_controller(self, key: str) -> ListController:
        """
        Controller for a list field whose size is not fixed.

        The controller already registered on the scope for this list is
        returned, so its keys survive re-rendering.
        """
        config = self._fieldset.get(key)
        if not isinstance(config, ListConfig) or config.count is not None:
            raise FieldConfigError(self.address_of(key), "not a dynamic list of fieldsets")

        address = self.address_of(key)
        controller = self.scope.get_list(address)
        if controller is not None:
            return controller
        return ListController(self.scope, address, self.fields[key])

    # Control lifecycle

    def render(self) -> list[Control]:
        """Create headless controls for every control field, in field order."""
        controls = []
        for key in self._control_keys():
            props = self.fields[key]
            for attributes in props if isinstance(props, list) else [props]:
                controls.append(Control.from_attributes(attributes))
        return controls

    def mount(self, key: str, control: Control) -> ControlBinding:
        """
        Attach a live control rendered for ``key``.

        Raises:
            FieldConfigError: If ``key`` is not a control field of this fieldset
            PathValidationError: If the control is not named by the field's address
            DuplicateAddressError: If another live control already owns the address
        """
        config = self._fieldset.get(key)
        if not isinstance(config, ControlConfig):
            raise FieldConfigError(self.address_of(key), "not a control field")

        address = self.address_of(key)
        if control.name != address:
            raise PathValidationError(control.name, f"expected control named '{address}'")

        existing = self.scope.bindings.get(address)
        if existing is not None and any(bound is control for bound in existing.controls):
            return existing

        binding = self.scope.bindings.attach(
            address, control, message=self._initial_errors.get(key, "")
        )
        control.add_listener("invalid", self._handle_invalid)
        control.add_listener("valid", self._handle_valid)
        return binding

    def unmount(self, key: str, control: Control | None = None) -> None:
        """Detach one control of ``key``, or all of them."""
        address = self.address_of(key)
        binding = self.scope.bindings.get(address)
        if binding is None:
            return
        for bound in binding.controls if control is None else [control]:
            bound.remove_listener("invalid", self._handle_invalid)
            bound.remove_listener("valid", self._handle_valid)
        self.scope.bindings.detach(address, control)

    def mount_form(self, form: Form) -> None:
        """Attach every control of ``form`` rendered for this fieldset."""
        for key in self._control_keys():
            address = self.address_of(key)
            for control in form.controls:
                if control.name == address:
                    self.mount(key, control)

    def update_fieldset(self, fieldset: FieldTree) -> None:
        """
        Replace the field configuration.

        Constraints may have changed, so controls currently showing a message
        are checked again.
        """
        self._fieldset = normalize_field_tree(fieldset)
        self.fields = self._build_fields()

        for key, message in self.errors.items():
            binding = self.scope.bindings.get(self.address_of(key))
            if binding is None:
                continue

            props = self.fields[key]
            if isinstance(props, list):
                if not props:
                    continue
                props = props[0]
            for control in binding.controls:
                control.apply_attributes(props)
                if message:
                    self.scope.registry.check_validity(control)

    # Notifications

    def _handle_invalid(self, event: ControlEvent) -> None:
        control = event.target
        key = last_segment(control.name)
        config = self._fieldset.get(key)
        if not isinstance(config, ControlConfig):
            logger.warning("No control configuration for '%s'", control.name)
            return

        message = synthesize_message(control.validity, config, control.validation_message)
        self._update(control.name, message)

    def _handle_valid(self, event: ControlEvent) -> None:
        self._update(event.target.name, "")

    def _update(self, address: Address, message: str) -> None:
        binding = self.scope.bindings.get(address)
        if binding is not None:
            binding.update(message)
