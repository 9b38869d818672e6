"""
Dynamic list controller.

Manages the elements of a list of fieldsets whose size is not fixed. Each
rendered element is identified by a stable key; keys survive insertion and
removal of other elements while element addresses are recomputed from
positions. Add and remove buttons carry structural directives and are
exempt from form validation.
"""

import itertools
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from formvalidity.core.path_utils import list_address, resolve_indexed
from formvalidity.core.types import Address
from formvalidity.exceptions import ListNameConflictError, PathValidationError
from formvalidity.lists.directive import (
    Insert,
    Remove,
    StructuralAction,
    draft_update,
)
from formvalidity.structure.attributes import ButtonAttributes, FieldsetOptions

if TYPE_CHECKING:
    from formvalidity.form.scope import FormScope

logger = logging.getLogger(__name__)


@dataclass
class ListItem:
    """One rendered element of a dynamic list."""

    key: int
    options: FieldsetOptions
    remove_button: ButtonAttributes


class ListController:
    """Stable keys and structural actions for one list of fieldsets.

    Params:
        scope: Scope of the enclosing form
        name: Address of the list
        options: Options of the initially rendered elements

    Raises:
        ListNameConflictError: If an element's address is not an element of ``name``
    """

    def __init__(
        self,
        scope: "FormScope",
        name: Address,
        options: Sequence[FieldsetOptions] = (),
    ):
        self.scope = scope
        self.name = name
        self._check_names(options)
        self._tokens = itertools.count()
        self._keys: list[int] = [next(self._tokens) for _ in options]
        self._origins: dict[int, FieldsetOptions] = dict(zip(self._keys, options))
        scope.register_list(self)

    def __len__(self) -> int:
        return len(self._keys)

    def _check_names(self, options: Sequence[FieldsetOptions]) -> None:
        for option in options:
            try:
                found = list_address(option.name)
            except PathValidationError as e:
                raise ListNameConflictError(self.name, option.name) from e
            if found != self.name:
                raise ListNameConflictError(self.name, found)

    @property
    def keys(self) -> list[int]:
        return list(self._keys)

    def address_of(self, index: int) -> Address:
        return resolve_indexed(self.name, index)

    @property
    def items(self) -> list[ListItem]:
        """Rendered elements in order, addressed by their current position."""
        items = []
        for index, key in enumerate(self._keys):
            origin = self._origins.get(key)
            items.append(
                ListItem(
                    key=key,
                    options=FieldsetOptions(
                        name=self.address_of(index),
                        value=origin.value if origin else None,
                        error=origin.error if origin else None,
                    ),
                    remove_button=self.remove_button(index),
                )
            )
        return items

    @property
    def add_button(self) -> ButtonAttributes:
        ((name, value),) = draft_update(self.name, settings=self.scope.settings).items()
        return ButtonAttributes(name=name, value=value, on_click=self._handle_append)

    def remove_button(self, index: int) -> ButtonAttributes:
        ((name, value),) = draft_update(
            self.name, index, settings=self.scope.settings
        ).items()
        return ButtonAttributes(
            name=name, value=value, on_click=partial(self._handle_remove, index)
        )

    # Mutations

    def append(self) -> Insert:
        """Add a new element at the end of the list."""
        key = next(self._tokens)
        self._keys.append(key)
        logger.debug("List '%s': appended key %d", self.name, key)
        return Insert(target=self.name)

    def remove(self, index: int) -> Remove:
        """
        Remove the element at ``index``.

        Raises:
            IndexError: If no element is rendered at ``index``
        """
        if not 0 <= index < len(self._keys):
            raise IndexError(f"List '{self.name}' has no element at {index}")
        key = self._keys.pop(index)
        self._origins.pop(key, None)
        logger.debug("List '%s': removed key %d at %d", self.name, key, index)
        return Remove(target=self.name, index=index)

    def apply(self, action: StructuralAction) -> bool:
        """
        Apply a decoded structural action addressed to this list.

        Returns:
            True if the list changed; actions for other lists and out-of-range
            removals are ignored
        """
        if action.target != self.name:
            return False
        if isinstance(action, Insert):
            self.append()
            return True
        if 0 <= action.index < len(self._keys):
            self.remove(action.index)
            return True
        logger.warning(
            "Ignoring removal of element %d from list '%s' of length %d",
            action.index,
            self.name,
            len(self._keys),
        )
        return False

    def reconcile(self, length: int) -> None:
        """
        Match the number of keys to the external value array's length.

        New keys are appended for growth and trailing keys dropped for
        shrinkage; surviving keys keep their identity.
        """
        while len(self._keys) < length:
            self._keys.append(next(self._tokens))
        while len(self._keys) > length:
            self._origins.pop(self._keys.pop(), None)
        logger.debug("List '%s': reconciled to %d keys", self.name, length)

    def update_options(self, options: Sequence[FieldsetOptions]) -> None:
        """Take new element options from the caller, reconciling by length."""
        self._check_names(options)
        self.reconcile(len(options))
        for key, option in zip(self._keys, options):
            self._origins[key] = option

    def close(self) -> None:
        self.scope.unregister_list(self.name)

    # Button handlers

    def _handle_append(self, event: Any) -> None:
        self.append()
        event.prevent_default()

    def _handle_remove(self, index: int, event: Any) -> None:
        self.apply(Remove(target=self.name, index=index))
        event.prevent_default()
