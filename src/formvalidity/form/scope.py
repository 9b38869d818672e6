"""
Form scope.

One ``FormScope`` is constructed per form instance and handed explicitly to
every binding and list controller of that form. It owns all mutable
per-form state (gate state, control bindings, list controllers) and releases
it when the form unmounts. The constraint registry it carries is stateless
and may be shared.
"""

import logging
from typing import TYPE_CHECKING

from formvalidity.core.types import Address
from formvalidity.exceptions import DuplicateAddressError
from formvalidity.form.gate import GateState
from formvalidity.lists.directive import StructuralAction
from formvalidity.settings import DEFAULT_SETTINGS, FormValiditySettings
from formvalidity.validity.bindings import ControlBindingRegistry
from formvalidity.validity.registry import ConstraintRegistry, create_constraint_registry

if TYPE_CHECKING:
    from formvalidity.lists.controller import ListController

logger = logging.getLogger(__name__)


class FormScope:
    """Per-form context shared by the bindings of one form."""

    def __init__(
        self,
        settings: FormValiditySettings | None = None,
        registry: ConstraintRegistry | None = None,
    ):
        self.settings = settings or DEFAULT_SETTINGS
        self.registry = registry or create_constraint_registry()
        self.bindings = ControlBindingRegistry()
        self.state = GateState()
        self._lists: dict[Address, "ListController"] = {}
        self.closed = False

    def __enter__(self) -> "FormScope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def register_list(self, controller: "ListController") -> None:
        """
        Register the controller of a dynamic list.

        Raises:
            DuplicateAddressError: If another controller already manages the list
        """
        existing = self._lists.get(controller.name)
        if existing is not None and existing is not controller:
            raise DuplicateAddressError(controller.name, owner="a list controller")
        self._lists[controller.name] = controller

    def unregister_list(self, name: Address) -> None:
        self._lists.pop(name, None)

    def get_list(self, name: Address) -> "ListController | None":
        return self._lists.get(name)

    def apply_structural_action(self, action: StructuralAction) -> bool:
        """
        Route a structural action to the controller of its list.

        Returns:
            True if a controller applied the action
        """
        controller = self._lists.get(action.target)
        if controller is None:
            logger.debug("No list controller for '%s'", action.target)
            return False
        return controller.apply(action)

    def close(self) -> None:
        """Release all per-form state."""
        self.bindings.clear()
        self._lists.clear()
        self.state = GateState()
        self.closed = True
