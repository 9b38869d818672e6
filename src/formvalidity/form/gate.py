"""
Touch/submit gate.

Decides when validation runs. Each transition is a pure function from the
current ``GateState`` and one input event to the next state and the list of
actions the caller must carry out:

    pristine --blur--> touched --submit--> submitted

- Blur marks the field touched and always re-checks it.
- Change re-checks a field only once it is touched or the form was submitted.
- Submit marks the form submitted and checks every control, unless the
  submitter is a structural action, in which case nothing is checked and
  the state is left alone.
- Reset forgets touched fields; the submitted flag survives.
"""

from dataclasses import dataclass
from enum import Enum

from attrs import frozen

from formvalidity.core.types import Address
from formvalidity.lists.directive import StructuralAction


class GatePhase(Enum):
    """Coarse phase of a form, derived from its gate state."""

    PRISTINE = "pristine"
    TOUCHED = "touched"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class GateState:
    """Touched addresses and submitted flag of one form instance."""

    touched: frozenset[Address] = frozenset()
    submitted: bool = False

    @property
    def phase(self) -> GatePhase:
        if self.submitted:
            return GatePhase.SUBMITTED
        if self.touched:
            return GatePhase.TOUCHED
        return GatePhase.PRISTINE

    def is_touched(self, address: Address) -> bool:
        return address in self.touched


# Input events


@frozen
class Blur:
    address: Address


@frozen
class Change:
    address: Address


@frozen
class Submit:
    """A submission; ``structural`` when the submitter carries the reserved directive."""

    structural: bool = False
    action: StructuralAction | None = None


@frozen
class Reset:
    pass


GateEvent = Blur | Change | Submit | Reset


# Actions


@frozen
class CheckControl:
    """Re-check the control that raised the event."""

    address: Address


@frozen
class CheckForm:
    """Re-check every control; remaining actions are dropped if any is invalid."""


@frozen
class ProceedSubmit:
    """Let the submission go through."""


@frozen
class ApplyStructuralAction:
    action: StructuralAction


@frozen
class ClearMessages:
    """Forget every synthesized message."""


GateAction = CheckControl | CheckForm | ProceedSubmit | ApplyStructuralAction | ClearMessages


def transition(state: GateState, event: GateEvent) -> tuple[GateState, list[GateAction]]:
    """
    Compute the next gate state and the actions an event triggers.

    Params:
        state: Current state of the form
        event: Blur, Change, Submit or Reset input

    Returns:
        The new state and the actions to carry out, in order

    Raises:
        TypeError: If the event is not a gate event
    """
    if isinstance(event, Blur):
        touched = state.touched | {event.address} if event.address else state.touched
        return GateState(touched=touched, submitted=state.submitted), [
            CheckControl(event.address)
        ]

    if isinstance(event, Change):
        if state.submitted or state.is_touched(event.address):
            return state, [CheckControl(event.address)]
        return state, []

    if isinstance(event, Submit):
        if event.structural:
            actions: list[GateAction] = []
            if event.action is not None:
                actions.append(ApplyStructuralAction(event.action))
            actions.append(ProceedSubmit())
            return state, actions
        return GateState(touched=state.touched, submitted=True), [
            CheckForm(),
            ProceedSubmit(),
        ]

    if isinstance(event, Reset):
        return GateState(submitted=state.submitted), [ClearMessages()]

    raise TypeError(f"Unsupported gate event: {event!r}")
