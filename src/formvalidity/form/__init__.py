"""
Form-level orchestration.

This package provides the touch/submit gate, the per-form scope and the
bindings that attach a form and its fieldsets to live controls.
"""

from formvalidity.form.fieldset import FieldsetBinding
from formvalidity.form.gate import GatePhase, GateState, transition
from formvalidity.form.scope import FormScope
from formvalidity.form.validity import FormValidity, SubmitResult

__all__ = [
    "FieldsetBinding",
    "FormScope",
    "FormValidity",
    "GatePhase",
    "GateState",
    "SubmitResult",
    "transition",
]
