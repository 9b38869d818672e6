"""
Validity evaluation for form-validity.

This package provides the native validity flags, the message synthesizer
and the control bindings. The constraint registry lives in
``formvalidity.validity.registry``.
"""

from formvalidity.validity.bindings import ControlBinding, ControlBindingRegistry
from formvalidity.validity.flags import ValidityFlag, ValidityState, ValidityStatus
from formvalidity.validity.messages import check_custom_validity, synthesize_message

__all__ = [
    "ValidityFlag",
    "ValidityState",
    "ValidityStatus",
    "check_custom_validity",
    "synthesize_message",
    "ControlBinding",
    "ControlBindingRegistry",
]
