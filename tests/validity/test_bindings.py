"""
Tests for control bindings.

This module tests attaching and detaching live controls, option groups
sharing an address and message bookkeeping.
"""

import gc

import pytest

from formvalidity.controls import Control, Form
from formvalidity.exceptions import DuplicateAddressError
from formvalidity.validity.bindings import ControlBinding, ControlBindingRegistry
from formvalidity.validity.flags import ValidityStatus


@pytest.fixture
def bindings():
    return ControlBindingRegistry()


class TestControlBinding:
    """Test the state of a single binding."""

    def test_starts_unknown(self):
        """Test that a new binding has not been evaluated."""
        binding = ControlBinding(address="email")
        assert binding.status is ValidityStatus.UNKNOWN
        assert binding.message == ""

    def test_update_sets_status(self):
        """Test status derived from the message."""
        binding = ControlBinding(address="email")
        binding.update("Required")
        assert binding.status is ValidityStatus.INVALID
        binding.update("")
        assert binding.status is ValidityStatus.VALID

    def test_clear(self):
        """Test forgetting the last evaluation."""
        binding = ControlBinding(address="email")
        binding.update("Required")
        binding.clear()
        assert (binding.status, binding.message) == (ValidityStatus.UNKNOWN, "")


class TestAttach:
    """Test mounting controls under an address."""

    def test_attach_creates_binding(self, bindings):
        """Test binding creation on first mount."""
        control = Control("email")
        Form(control)
        binding = bindings.attach("email", control)
        assert "email" in bindings
        assert binding.controls == [control]

    def test_seed_message(self, bindings):
        """Test an initial message for a new binding."""
        control = Control("email")
        Form(control)
        binding = bindings.attach("email", control, message="Taken")
        assert binding.message == "Taken"
        assert binding.status is ValidityStatus.INVALID

    def test_reattach_is_idempotent(self, bindings):
        """Test mounting the same control twice."""
        control = Control("email")
        Form(control)
        bindings.attach("email", control)
        assert bindings.attach("email", control).controls == [control]

    def test_duplicate_address(self, bindings):
        """Test two distinct controls under one address."""
        first, second = Control("email"), Control("email")
        Form(first, second)
        bindings.attach("email", first)
        with pytest.raises(DuplicateAddressError) as exc_info:
            bindings.attach("email", second)
        assert exc_info.value.address == "email"

    def test_radio_group_shares_address(self, bindings):
        """Test option groups rendering several controls at one address."""
        small = Control("size", "radio", value="s")
        large = Control("size", "radio", value="l")
        Form(small, large)
        bindings.attach("size", small)
        binding = bindings.attach("size", large)
        assert binding.controls == [small, large]
        assert len(bindings) == 1

    def test_mixed_option_types_rejected(self, bindings):
        """Test that a checkbox cannot join a radio group."""
        radio = Control("size", "radio", value="s")
        checkbox = Control("size", "checkbox", value="l")
        Form(radio, checkbox)
        bindings.attach("size", radio)
        with pytest.raises(DuplicateAddressError):
            bindings.attach("size", checkbox)

    def test_unmounted_control_frees_address(self, bindings):
        """Test that a control removed from its form no longer owns the address."""
        old, new = Control("email"), Control("email")
        form = Form(old)
        bindings.attach("email", old)
        form.remove(old)
        form.append(new)
        assert bindings.attach("email", new).controls == [new]

    def test_collected_control_dropped(self, bindings):
        """Test that bindings do not keep controls alive."""
        control = Control("email")
        Form(control)
        binding = bindings.attach("email", control)
        del control
        gc.collect()
        assert binding.controls == []


class TestDetach:
    """Test unmounting controls."""

    def test_detach_last_control_drops_binding(self, bindings):
        """Test binding removal with its last control."""
        control = Control("email")
        Form(control)
        bindings.attach("email", control)
        bindings.detach("email", control)
        assert "email" not in bindings

    def test_detach_one_of_group(self, bindings):
        """Test that remaining group members keep the binding."""
        small = Control("size", "radio", value="s")
        large = Control("size", "radio", value="l")
        Form(small, large)
        bindings.attach("size", small)
        bindings.attach("size", large)
        bindings.detach("size", small)
        assert bindings.get("size").controls == [large]

    def test_detach_unknown_address(self, bindings):
        """Test that detaching nothing is a no-op."""
        bindings.detach("missing")
        assert len(bindings) == 0


class TestMessages:
    """Test registry-wide message access."""

    def test_errors_and_clear_messages(self, bindings):
        """Test collecting and clearing messages."""
        email, name = Control("email"), Control("name")
        Form(email, name)
        bindings.attach("email", email).update("Required")
        bindings.attach("name", name)
        assert bindings.errors() == {"email": "Required", "name": ""}

        bindings.clear_messages()
        assert bindings.errors() == {"email": "", "name": ""}
        assert all(b.status is ValidityStatus.UNKNOWN for b in bindings)
