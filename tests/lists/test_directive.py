"""
Tests for the structural directive codec.
"""

import logging

import pytest

from formvalidity.controls import SubmitControl
from formvalidity.exceptions import DirectiveError, PathValidationError
from formvalidity.lists import Insert, Remove
from formvalidity.lists.directive import (
    decode_directive,
    draft_update,
    encode_directive,
    should_skip_validate,
)
from formvalidity.settings import FormValiditySettings


class TestEncode:
    """Test encoding actions."""

    def test_insert(self):
        assert encode_directive(Insert("tasks")) == "tasks:insert"

    def test_remove_nested_list(self):
        assert encode_directive(Remove("plan.tasks[2].steps", 0)) == "plan.tasks[2].steps:remove:0"

    def test_negative_index(self):
        """Test that only non-negative indices encode."""
        with pytest.raises(PathValidationError):
            encode_directive(Remove("tasks", -1))

    def test_bad_target(self):
        """Test that targets must be addresses."""
        with pytest.raises(PathValidationError):
            encode_directive(Insert("tasks["))


class TestDecode:
    """Test decoding directive values."""

    @pytest.mark.parametrize(
        "value, action",
        [
            ("tasks:insert", Insert("tasks")),
            ("tasks:remove:3", Remove("tasks", 3)),
            ("a.b[1].c:remove:10", Remove("a.b[1].c", 10)),
        ],
    )
    def test_valid(self, value, action):
        assert decode_directive(value) == action

    @pytest.mark.parametrize(
        "value",
        ["", "tasks", "tasks:append", "tasks:remove", "tasks:remove:-1", "tasks:remove:x", ":insert", 3],
    )
    def test_malformed_ignored(self, value, caplog):
        """Test that malformed values decode to nothing with a warning."""
        with caplog.at_level(logging.WARNING, logger="formvalidity.lists.directive"):
            assert decode_directive(value) is None
        assert "Ignoring structural directive" in caplog.text

    def test_strict(self):
        """Test the raising decoder."""
        with pytest.raises(DirectiveError) as exc_info:
            decode_directive("tasks:append", strict=True)
        assert exc_info.value.value == "tasks:append"

    def test_non_ascii_index(self):
        """Test that only ASCII digits form an index."""
        assert decode_directive("tasks:remove:٣") is None


class TestDraftUpdate:
    """Test building the reserved name/value pair."""

    def test_insert(self):
        assert draft_update("tasks") == {"__form-validity__": "tasks:insert"}

    def test_remove(self):
        assert draft_update("tasks", 1) == {"__form-validity__": "tasks:remove:1"}

    def test_custom_directive_name(self):
        """Test the reserved name taken from settings."""
        settings = FormValiditySettings(directive_name="__action__")
        assert draft_update("tasks", settings=settings) == {"__action__": "tasks:insert"}


class TestShouldSkipValidate:
    """Test recognizing structural submitters."""

    def test_directive_button(self):
        assert should_skip_validate(SubmitControl("__form-validity__", "tasks:insert"))

    def test_other_button(self):
        assert not should_skip_validate(SubmitControl("save", "1"))

    def test_no_submitter(self):
        """Test an implicit submission."""
        assert not should_skip_validate(None)

    def test_custom_name(self):
        """Test that only the configured name counts."""
        settings = FormValiditySettings(directive_name="__action__")
        button = SubmitControl("__form-validity__", "tasks:insert")
        assert not should_skip_validate(button, settings)
