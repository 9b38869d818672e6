"""
Runtime links between addresses and live controls.

A ``ControlBinding`` is created when a control mounts and dropped when its
last control unmounts. It holds weak references only: the UI layer owns the
controls.
"""

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from formvalidity.core.types import Address
from formvalidity.exceptions import DuplicateAddressError
from formvalidity.validity.flags import ValidityStatus

if TYPE_CHECKING:
    from formvalidity.controls import Control

# Option groups render several controls under a single address
GROUPABLE_TYPES = frozenset({"checkbox", "radio"})


@dataclass
class ControlBinding:
    """An address, its live control(s) and the last synthesized message."""

    address: Address
    status: ValidityStatus = ValidityStatus.UNKNOWN
    message: str = ""
    _refs: list[weakref.ref] = field(default_factory=list, repr=False)

    @property
    def controls(self) -> list["Control"]:
        """Live controls still mounted under this address."""
        controls = []
        for ref in self._refs:
            control = ref()
            if control is not None and control.connected:
                controls.append(control)
        return controls

    def update(self, message: str) -> None:
        self.message = message
        self.status = ValidityStatus.INVALID if message else ValidityStatus.VALID

    def clear(self) -> None:
        self.message = ""
        self.status = ValidityStatus.UNKNOWN


class ControlBindingRegistry:
    """Per-form registry of control bindings keyed by address."""

    def __init__(self):
        self._bindings: dict[Address, ControlBinding] = {}

    def __contains__(self, address: Address) -> bool:
        return address in self._bindings

    def __iter__(self) -> Iterator[ControlBinding]:
        return iter(list(self._bindings.values()))

    def __len__(self) -> int:
        return len(self._bindings)

    def get(self, address: Address) -> ControlBinding | None:
        return self._bindings.get(address)

    def attach(self, address: Address, control: "Control", message: str = "") -> ControlBinding:
        """
        Bind a mounted control to its address.

        Params:
            address: Address the control is rendered under
            control: The live control
            message: Initial message for a newly created binding

        Returns:
            The binding for ``address``

        Raises:
            DuplicateAddressError: If another live control already owns the address
                and the two are not members of the same option group
        """
        binding = self._bindings.get(address)
        if binding is None:
            binding = ControlBinding(address=address)
            if message:
                binding.update(message)
            self._bindings[address] = binding

        for existing in binding.controls:
            if existing is control:
                return binding
            if existing.type not in GROUPABLE_TYPES or existing.type != control.type:
                raise DuplicateAddressError(address)

        binding._refs.append(weakref.ref(control))
        return binding

    def detach(self, address: Address, control: "Control | None" = None) -> None:
        """
        Unbind one control, or every control, from an address.

        The binding itself is dropped once no control remains.
        """
        binding = self._bindings.get(address)
        if binding is None:
            return

        if control is None:
            binding._refs.clear()
        else:
            binding._refs = [
                ref for ref in binding._refs if ref() is not None and ref() is not control
            ]
        if not binding._refs:
            del self._bindings[address]

    def errors(self) -> dict[Address, str]:
        """Current message of every binding, empty string when valid."""
        return {address: binding.message for address, binding in self._bindings.items()}

    def clear_messages(self) -> None:
        for binding in self._bindings.values():
            binding.clear()

    def clear(self) -> None:
        self._bindings.clear()
