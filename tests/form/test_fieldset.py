"""
Tests for fieldset bindings.

This module tests rendering, mounting controls, nested levels, initial
errors and reconfiguration of a fieldset.
"""

import pytest

from formvalidity.controls import Control, Form
from formvalidity.exceptions import (
    DuplicateAddressError,
    FieldConfigError,
    PathValidationError,
)
from formvalidity.form import FieldsetBinding
from formvalidity.lists import ListController
from formvalidity.structure import FieldsetOptions


PROFILE = {
    "email": {"type": "email", "required": True},
    "address": {
        "kind": "fieldset",
        "fields": {"city": {"required": "City please"}, "zip": {"pattern": r"\d{4}"}},
    },
    "tasks": {"kind": "list-of-fieldset", "fields": {"title": {"required": True}}},
    "size": {"type": "radio", "options": ["s", "m", "l"], "required": True},
}


class TestRender:
    """Test controls produced for a fieldset."""

    def test_render_control_fields(self, scope):
        """Test that only control fields render, option groups per option."""
        binding = FieldsetBinding(scope, PROFILE)
        controls = binding.render()
        assert [(c.name, c.type, c.value) for c in controls] == [
            ("email", "email", ""),
            ("size", "radio", "s"),
            ("size", "radio", "m"),
            ("size", "radio", "l"),
        ]

    def test_initial_values(self, scope):
        """Test rendering initial values."""
        binding = FieldsetBinding(
            scope, PROFILE, FieldsetOptions(value={"email": "a@b.com", "size": "m"})
        )
        controls = binding.render()
        assert controls[0].value == "a@b.com"
        assert [c.checked for c in controls[1:]] == [False, True, False]

    def test_malformed_config(self, scope):
        """Test that malformed configuration aborts construction."""
        with pytest.raises(FieldConfigError):
            FieldsetBinding(scope, {"age": {"type": "number", "step": 0}})


class TestMount:
    """Test attaching live controls."""

    def test_mount_form_binds_every_control(self, make_form):
        """Test mounting all controls of a rendered form."""
        _, validity, _ = make_form(PROFILE)
        assert set(validity.scope.bindings.errors()) == {"email", "size"}
        assert len(validity.scope.bindings.get("size").controls) == 3

    def test_mount_non_control_key(self, scope):
        """Test mounting under a fieldset key."""
        binding = FieldsetBinding(scope, PROFILE)
        control = Control("address")
        Form(control)
        with pytest.raises(FieldConfigError):
            binding.mount("address", control)

    def test_mount_misnamed_control(self, scope):
        """Test mounting a control not named by its field address."""
        binding = FieldsetBinding(scope, PROFILE)
        control = Control("mail")
        Form(control)
        with pytest.raises(PathValidationError):
            binding.mount("email", control)

    def test_duplicate_control(self, make_form):
        """Test two live controls claiming one address."""
        form, _, binding = make_form(PROFILE)
        extra = Control("email")
        form.append(extra)
        with pytest.raises(DuplicateAddressError):
            binding.mount("email", extra)

    def test_remount_is_idempotent(self, make_form):
        """Test that mounting a bound control again adds no second listener."""
        form, validity, binding = make_form(PROFILE)
        email = form.get("email")
        assert binding.mount("email", email) is validity.scope.bindings.get("email")
        assert email._listeners["invalid"].count(binding._handle_invalid) == 1
        assert email._listeners["valid"].count(binding._handle_valid) == 1

    def test_unmount(self, make_form):
        """Test detaching a field's controls."""
        form, validity, binding = make_form(PROFILE)
        email = form.get("email")
        binding.unmount("email")
        assert "email" not in validity.scope.bindings

        email.blur()
        assert binding.errors["email"] == ""

    def test_unmounted_control_does_not_report(self, make_form):
        """Test that a control removed from the form is not evaluated."""
        form, validity, binding = make_form(PROFILE)
        email = form.get("email")
        form.remove(email)
        assert validity.scope.registry.check_validity(email) is True
        assert binding.errors["email"] == ""


class TestErrors:
    """Test per-field messages."""

    def test_initial_errors_shown_until_checked(self, make_form):
        """Test messages supplied with the initial state."""
        form, _, binding = make_form(
            PROFILE,
            FieldsetOptions(value={"email": "a@b.com"}, error={"email": "Already taken"}),
        )
        assert binding.errors["email"] == "Already taken"

        form.get("email").blur()
        assert binding.errors["email"] == ""

    def test_initial_errors_without_controls(self, scope):
        """Test errors of a fieldset that has not mounted yet."""
        binding = FieldsetBinding(scope, PROFILE, FieldsetOptions(error={"email": "Taken"}))
        assert binding.errors == {"email": "Taken", "size": ""}

    def test_radio_group_message(self, make_form):
        """Test the single message of an option group."""
        form, _, binding = make_form(PROFILE)
        form.controls[2].blur()
        assert binding.errors["size"] == "Please select one of these options."

        form.controls[3].set_checked()
        assert binding.errors["size"] == ""


class TestNested:
    """Test nested fieldsets and lists."""

    def test_nested_fieldset(self, make_form):
        """Test a nested level bound to the same scope."""
        form, _, root = make_form(PROFILE)
        address = root.nested("address")
        assert address.name == "address"
        for control in address.render():
            form.append(control)
        address.mount_form(form)

        form.get("address.city").blur()
        assert address.errors == {"city": "City please", "zip": ""}

        form.get("address.zip").set_value("12345")
        form.get("address.zip").blur()
        assert address.errors["zip"] == "Please match the requested format."

    def test_nested_requires_fieldset(self, scope):
        """Test asking for a nested level of a control field."""
        with pytest.raises(FieldConfigError):
            FieldsetBinding(scope, PROFILE).nested("email")

    def test_list_elements(self, scope):
        """Test bindings for elements of a list."""
        root = FieldsetBinding(
            scope,
            PROFILE,
            FieldsetOptions(
                value={"tasks": [{"title": "Write"}, {"title": ""}]},
                error={"tasks": [None, {"title": "Needed"}]},
            ),
        )
        second = root.element("tasks", 1)
        assert second.name == "tasks[1]"
        assert second.errors == {"title": "Needed"}
        assert second.render()[0].name == "tasks[1].title"

    def test_list_controller(self, scope):
        """Test the controller of a dynamic list."""
        root = FieldsetBinding(
            scope, PROFILE, FieldsetOptions(value={"tasks": [{"title": "Write"}]})
        )
        controller = root.list_controller("tasks")
        assert isinstance(controller, ListController)
        assert scope.get_list("tasks") is controller
        assert [item.options.name for item in controller.items] == ["tasks[0]"]

    def test_list_controller_survives_rerender(self, scope):
        """Test that asking again returns the same controller and keys."""
        root = FieldsetBinding(
            scope, PROFILE, FieldsetOptions(value={"tasks": [{"title": "Write"}]})
        )
        controller = root.list_controller("tasks")
        controller.append()

        rerendered = FieldsetBinding(
            scope, PROFILE, FieldsetOptions(value={"tasks": [{"title": "Write"}]})
        )
        assert rerendered.list_controller("tasks") is controller
        assert controller.keys == [0, 1]

    def test_fixed_list_has_no_controller(self, scope):
        """Test that a list of fixed size cannot be grown or shrunk."""
        fieldset = {"rows": {"kind": "list-of-fieldset", "count": 2, "fields": {"v": {}}}}
        root = FieldsetBinding(scope, fieldset)
        assert len(root.fields["rows"]) == 2
        with pytest.raises(FieldConfigError):
            root.list_controller("rows")


class TestUpdateFieldset:
    """Test reconfiguring a mounted fieldset."""

    def test_new_constraint_applies(self, make_form):
        """Test that controls take new constraints."""
        form, _, binding = make_form({"code": {}})
        binding.update_fieldset({"code": {"required": True}})
        assert form.get("code").required is True

    def test_messages_rechecked(self, make_form):
        """Test that currently shown messages follow the new constraints."""
        form, _, binding = make_form({"age": {"type": "number", "min": 18}})
        age = form.get("age")
        age.set_value("16")
        age.blur()
        assert binding.errors["age"] == "Value must be greater than or equal to 18."

        binding.update_fieldset({"age": {"type": "number", "min": (16, "Too young")}})
        assert binding.errors["age"] == ""

    def test_custom_message_updates(self, make_form):
        """Test that a new custom message replaces the old one."""
        form, _, binding = make_form({"name": {"required": "Old"}})
        form.get("name").blur()
        binding.update_fieldset({"name": {"required": "New"}})
        assert binding.errors["name"] == "New"

    def test_quiet_fields_stay_quiet(self, make_form):
        """Test that fields without a message are not checked on update."""
        _, _, binding = make_form({"name": {}})
        binding.update_fieldset({"name": {"required": True}})
        assert binding.errors["name"] == ""
