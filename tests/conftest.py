"""
Shared test fixtures and utilities for the form-validity test suite.
"""

import pytest

from formvalidity.controls import Form
from formvalidity.form import FieldsetBinding, FormScope, FormValidity


@pytest.fixture
def scope():
    """Fresh form scope, closed after the test."""
    with FormScope() as form_scope:
        yield form_scope


@pytest.fixture
def make_form(scope):
    """Render a field tree into a mounted headless form.

    Usage:
        def test_something(make_form):
            form, validity, fieldset = make_form({"email": {"type": "email"}})
    """

    def _make_form(fieldset, options=None, **validity_options):
        binding = FieldsetBinding(scope, fieldset, options)
        form = Form(*binding.render())
        validity = FormValidity(scope, **validity_options)
        validity.mount(form)
        binding.mount_form(form)
        return form, validity, binding

    return _make_form
