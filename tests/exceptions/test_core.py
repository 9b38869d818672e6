"""
Tests for the form-validity exception hierarchy.
"""

import pytest

from formvalidity.exceptions import (
    DirectiveError,
    DuplicateAddressError,
    FieldConfigError,
    FormValidityError,
    ListNameConflictError,
    PathValidationError,
)


@pytest.mark.parametrize(
    "error",
    [
        FieldConfigError("age", "step must be positive"),
        PathValidationError("tasks[", "unexpected character"),
        ListNameConflictError("tasks", "notes"),
        DuplicateAddressError("email"),
        DirectiveError("tasks:append", "unknown action"),
    ],
)
def test_all_errors_share_base(error):
    """Test that every error can be caught as FormValidityError."""
    assert isinstance(error, FormValidityError)


class TestMessages:
    """Test exception attributes and messages."""

    def test_field_config_error(self):
        error = FieldConfigError("age", "step must be positive")
        assert error.field_key == "age"
        assert str(error) == "Invalid configuration for field 'age': step must be positive"

    def test_path_validation_error(self):
        error = PathValidationError("tasks[", "unexpected character at 5")
        assert (error.path, error.reason) == ("tasks[", "unexpected character at 5")
        assert "tasks[" in str(error)

    def test_list_name_conflict(self):
        error = ListNameConflictError("tasks", "notes")
        assert "expected 'tasks', found 'notes'" in str(error)

    def test_duplicate_address(self):
        error = DuplicateAddressError("email")
        assert error.address == "email"
        assert str(error) == "Address 'email' is already bound to a live control"

    def test_duplicate_address_owner(self):
        error = DuplicateAddressError("tasks", owner="a list controller")
        assert str(error) == "Address 'tasks' is already bound to a list controller"

    def test_directive_error(self):
        error = DirectiveError("x", "bad")
        assert str(error) == "Malformed structural directive 'x': bad"
