"""
Form-level binding.

``FormValidity`` attaches the touch/submit gate to a form: it feeds blur,
change, submit and reset interactions to ``transition`` and carries out the
resulting actions against the scope's constraint registry.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from formvalidity.controls import Control, ControlEvent, Form, SubmitEvent
from formvalidity.form.gate import (
    ApplyStructuralAction,
    Blur,
    Change,
    CheckControl,
    CheckForm,
    ClearMessages,
    GateAction,
    GateEvent,
    ProceedSubmit,
    Reset,
    Submit,
    transition,
)
from formvalidity.form.scope import FormScope
from formvalidity.lists.directive import (
    StructuralAction,
    decode_directive,
    should_skip_validate,
)
from formvalidity.structure.attributes import FormAttributes

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass
class SubmitResult:
    """Outcome of one submit interaction."""

    proceeded: bool
    structural: bool = False
    action: StructuralAction | None = None


class FormValidity:
    """Touch/submit gate bound to one form.

    Params:
        scope: Scope of the form
        no_validate: Initial ``noValidate``; defaults to the scope settings
        on_blur: Caller handler run after each blur
        on_change: Caller handler run after each change
        on_submit: Caller handler run when a submission proceeds
    """

    def __init__(
        self,
        scope: FormScope,
        *,
        no_validate: bool | None = None,
        on_blur: Handler | None = None,
        on_change: Handler | None = None,
        on_submit: Handler | None = None,
    ):
        self.scope = scope
        self.form: Form | None = None
        self._no_validate = (
            scope.settings.initial_no_validate if no_validate is None else no_validate
        )
        self._on_blur = on_blur
        self._on_change = on_change
        self._on_submit = on_submit
        self.last_result: SubmitResult | None = None

    @property
    def no_validate(self) -> bool:
        return self._no_validate

    @property
    def attributes(self) -> FormAttributes:
        return FormAttributes(
            no_validate=self._no_validate,
            on_blur=self.handle_blur,
            on_change=self.handle_change,
            on_submit=self.handle_submit,
            on_reset=self.handle_reset,
        )

    def mount(self, form: Form) -> None:
        """Attach to a rendered form and take over validation from the platform."""
        self.form = form
        self._no_validate = True
        form.no_validate = True
        form.messages = {**self.scope.settings.messages, **form.messages}
        form.add_listener("blur", self.handle_blur)
        form.add_listener("change", self.handle_change)
        form.add_listener("submit", self.handle_submit)
        form.add_listener("reset", self.handle_reset)

    def unmount(self) -> None:
        """Detach from the form and release the scope's per-form state."""
        if self.form is not None:
            self.form.remove_listener("blur", self.handle_blur)
            self.form.remove_listener("change", self.handle_change)
            self.form.remove_listener("submit", self.handle_submit)
            self.form.remove_listener("reset", self.handle_reset)
            self.form = None
        self.scope.close()

    # Handlers

    def handle_blur(self, event: ControlEvent) -> None:
        if isinstance(event.target, Control):
            self._run(Blur(event.target.name), event.target)
        if self._on_blur:
            self._on_blur(event)

    def handle_change(self, event: ControlEvent) -> None:
        if isinstance(event.target, Control):
            self._run(Change(event.target.name), event.target)
        if self._on_change:
            self._on_change(event)

    def handle_submit(self, event: SubmitEvent) -> SubmitResult:
        """
        Gate a submission.

        A submission from a structural action button skips validation. When
        a list controller of this form applies the action, the submission is
        handled locally and its default is prevented; otherwise it proceeds
        so the receiving side can apply the directive. Any other submission
        checks every control and is prevented if one is invalid.
        """
        form = event.target if isinstance(event.target, Form) else self.form
        submitter = event.submitter
        structural = should_skip_validate(submitter, self.scope.settings)
        action = decode_directive(submitter.value) if structural else None

        proceeded = self._run(Submit(structural=structural, action=action), form)
        if proceeded:
            if self._on_submit:
                self._on_submit(event)
        else:
            event.prevent_default()

        self.last_result = SubmitResult(
            proceeded=proceeded, structural=structural, action=action
        )
        return self.last_result

    def handle_reset(self, event: ControlEvent | None = None) -> None:
        self._run(Reset(), self.form)

    def _run(self, event: GateEvent, target: Any) -> bool:
        before = self.scope.state.phase
        self.scope.state, actions = transition(self.scope.state, event)
        logger.debug(
            "Gate %s: %s -> %s", type(event).__name__, before.value, self.scope.state.phase.value
        )
        return self._execute(actions, target)

    def _execute(self, actions: list[GateAction], target: Any) -> bool:
        registry = self.scope.registry
        for action in actions:
            if isinstance(action, CheckControl):
                registry.check_validity(target)
            elif isinstance(action, CheckForm):
                if target is not None and not registry.check_validity(target):
                    return False
            elif isinstance(action, ApplyStructuralAction):
                if self.scope.apply_structural_action(action.action):
                    return False
            elif isinstance(action, ClearMessages):
                self.scope.bindings.clear_messages()
            elif isinstance(action, ProceedSubmit):
                return True
        return True
