"""
Constraint registry.

The single coordination point through which "check this form or control
now" requests flow. The registry keeps no mutable state of its own; one
instance is shared by every control of a form through its ``FormScope``.
"""

import logging

from formvalidity.controls import Control, ControlEvent, ControlGroup, Form

logger = logging.getLogger(__name__)


class ConstraintRegistry:
    """Walks controls and triggers their native validity evaluation.

    An invalid control reports through its own ``invalid`` notification. A
    valid control receives an explicit ``valid`` notification so that
    bindings can clear a previous message without any sentinel value.
    """

    def check_validity(self, target: Control | Form | ControlGroup) -> bool:
        """
        Re-evaluate a control, a form or a subtree of a form.

        Every control of a form or subtree is evaluated, even after the first
        failure, so that all messages are refreshed.

        Params:
            target: A single control, a form, or a group from ``Form.subtree``

        Returns:
            True if every evaluated control is valid; detached controls count as valid
        """
        if isinstance(target, Control):
            return self._check_control(target)

        results = [self._check_control(control) for control in target.controls]
        valid = all(results)
        logger.debug(
            "Checked %d controls: %d invalid", len(results), results.count(False)
        )
        return valid

    def _check_control(self, control: Control) -> bool:
        if not control.connected:
            return True

        valid = control.check_validity()
        if valid:
            control.dispatch(ControlEvent("valid", control))
        return valid


def create_constraint_registry() -> ConstraintRegistry:
    """Create the registry shared by one form scope."""
    return ConstraintRegistry()
