"""
form-validity - Constraint validation orchestration for forms

form-validity binds a declarative per-field constraint schema to a tree of
form controls, decides when validation runs (blur, change, submit) and
manages dynamically sized lists of fieldsets through non-validating
structural submit actions.
"""

from importlib.metadata import version

from formvalidity.controls import Control, Form, SubmitControl
from formvalidity.form import FieldsetBinding, FormScope, FormValidity
from formvalidity.lists import ListController, should_skip_validate
from formvalidity.settings import FormValiditySettings
from formvalidity.structure import get_field_config
from formvalidity.submission import parse_submission
from formvalidity.validity.registry import ConstraintRegistry, create_constraint_registry

__version__ = version("form-validity")

__all__ = [
    "__version__",
    "Control",
    "ConstraintRegistry",
    "FieldsetBinding",
    "Form",
    "FormScope",
    "FormValidity",
    "FormValiditySettings",
    "ListController",
    "SubmitControl",
    "create_constraint_registry",
    "get_field_config",
    "parse_submission",
    "should_skip_validate",
]
