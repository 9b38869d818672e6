"""
Headless form controls.

An in-memory implementation of the control layer the bindings talk to: a
``Form`` holding ``Control`` and ``SubmitControl`` elements in document
order. Controls compute their native validity flags the way HTML constraint
validation does, fire ``invalid`` notifications from ``check_validity`` and
bubble ``blur``/``change`` interactions up to their form.
"""

import logging
import math
import re
from collections import defaultdict
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from formvalidity.core.types import Address, FieldValue
from formvalidity.structure.attributes import ButtonAttributes, ControlAttributes
from formvalidity.validity.flags import ValidityFlag, ValidityState

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES: dict[ValidityFlag, str] = {
    ValidityFlag.VALUE_MISSING: "Please fill out this field.",
    ValidityFlag.TYPE_MISMATCH: "Please enter a valid value.",
    ValidityFlag.BAD_INPUT: "Please enter a valid value.",
    ValidityFlag.TOO_SHORT: "Please lengthen this text to {min_length} characters or more.",
    ValidityFlag.TOO_LONG: "Please shorten this text to no more than {max_length} characters.",
    ValidityFlag.RANGE_UNDERFLOW: "Value must be greater than or equal to {min}.",
    ValidityFlag.RANGE_OVERFLOW: "Value must be less than or equal to {max}.",
    ValidityFlag.STEP_MISMATCH: "Please enter a valid value.",
    ValidityFlag.PATTERN_MISMATCH: "Please match the requested format.",
}

TYPE_MESSAGES: dict[tuple[ValidityFlag, str], str] = {
    (ValidityFlag.VALUE_MISSING, "checkbox"): "Please check this box if you want to proceed.",
    (ValidityFlag.VALUE_MISSING, "radio"): "Please select one of these options.",
    (ValidityFlag.VALUE_MISSING, "select"): "Please select an item in the list.",
    (ValidityFlag.TYPE_MISMATCH, "email"): "Please enter an email address.",
    (ValidityFlag.TYPE_MISMATCH, "url"): "Please enter a URL.",
    (ValidityFlag.BAD_INPUT, "number"): "Please enter a number.",
}

BARRED_TYPES = frozenset({"hidden", "button", "submit", "reset"})
CHECKABLE_TYPES = frozenset({"checkbox", "radio"})
LENGTH_TYPES = frozenset({"text", "search", "url", "tel", "email", "password", "textarea"})
PATTERN_TYPES = frozenset({"text", "search", "url", "tel", "email", "password"})
NUMERIC_TYPES = frozenset({"number", "range"})
TEMPORAL_TYPES = frozenset({"date", "month", "time", "datetime-local"})

# WHATWG "valid e-mail address"
_EMAIL = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)
_URL = re.compile(r"[a-zA-Z][a-zA-Z0-9+.-]*:\S+")
_MONTH = re.compile(r"(\d{4,})-(\d{2})")


def _parse_number(raw: Any) -> float | None:
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_temporal(kind: str, raw: Any) -> Any:
    if not isinstance(raw, str):
        return None
    try:
        if kind == "date":
            try:
                return date.fromisoformat(raw)
            except ValueError:
                return datetime.fromisoformat(raw).date()
        if kind == "datetime-local":
            return datetime.fromisoformat(raw).replace(tzinfo=None)
        if kind == "time":
            return time.fromisoformat(raw)
        if kind == "month":
            match = _MONTH.fullmatch(raw)
            if match and 1 <= int(match.group(2)) <= 12:
                return int(match.group(1)), int(match.group(2))
    except ValueError:
        return None
    return None


def _parse_comparable(kind: str, raw: Any) -> Any:
    if raw is None or raw == "":
        return None
    if kind in NUMERIC_TYPES:
        return _parse_number(raw)
    if kind in TEMPORAL_TYPES:
        return _parse_temporal(kind, raw)
    return None


@dataclass
class ControlEvent:
    """Notification dispatched to listeners of a control or form."""

    type: str
    target: Any
    bubbles: bool = False
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class SubmitEvent(ControlEvent):
    """Submit notification; ``submitter`` is the button that requested it."""

    submitter: "SubmitControl | None" = None


Listener = Callable[[ControlEvent], None]


class EventTarget:
    """Minimal listener registry shared by controls and forms."""

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def add_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        if listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    def dispatch(self, event: ControlEvent) -> ControlEvent:
        """Call every listener registered for the event's type, in order."""
        for listener in list(self._listeners[event.type]):
            listener(event)
        return event


class Control(EventTarget):
    """A single input, textarea or select element."""

    def __init__(
        self,
        name: Address,
        type: str = "text",
        *,
        value: FieldValue = None,
        checked: bool = False,
        required: bool = False,
        multiple: bool = False,
        min_length: int | None = None,
        max_length: int | None = None,
        min: str | int | float | None = None,
        max: str | int | float | None = None,
        step: str | int | float | None = None,
        pattern: str | None = None,
        options: tuple[str, ...] | None = None,
        disabled: bool = False,
        read_only: bool = False,
    ):
        super().__init__()
        self.name = name
        self.type = type
        self.required = required
        self.multiple = multiple
        self.min_length = min_length
        self.max_length = max_length
        self.min = min
        self.max = max
        self.step = step
        self.pattern = pattern
        self.options = options
        self.disabled = disabled
        self.read_only = read_only
        self.form: Form | None = None

        if value is None:
            value = [] if self._is_list_valued else ("on" if type in CHECKABLE_TYPES else "")
        self.default_value = value
        self.default_checked = checked
        self.value = value
        self.checked = checked
        self._dirty = False
        self._custom_validity = ""

    @classmethod
    def from_attributes(cls, attributes: ControlAttributes) -> "Control":
        """Render produced attributes into a live control."""
        if attributes.type in CHECKABLE_TYPES:
            value = attributes.value
            checked = bool(attributes.default_checked)
        else:
            value = attributes.default_value
            checked = False
        return cls(
            attributes.name,
            attributes.type,
            value=value,
            checked=checked,
            required=attributes.required,
            multiple=attributes.multiple,
            min_length=attributes.min_length,
            max_length=attributes.max_length,
            min=attributes.min,
            max=attributes.max,
            step=attributes.step,
            pattern=attributes.pattern,
            options=attributes.options,
        )

    def apply_attributes(self, attributes: ControlAttributes) -> None:
        """Update constraint attributes in place, keeping the current value."""
        self.required = attributes.required
        self.multiple = attributes.multiple
        self.min_length = attributes.min_length
        self.max_length = attributes.max_length
        self.min = attributes.min
        self.max = attributes.max
        self.step = attributes.step
        self.pattern = attributes.pattern
        self.options = attributes.options

    def __repr__(self) -> str:
        return f"Control(name={self.name!r}, type={self.type!r})"

    @property
    def _is_list_valued(self) -> bool:
        return self.type == "select" and self.multiple

    @property
    def connected(self) -> bool:
        return self.form is not None

    @property
    def will_validate(self) -> bool:
        return not (self.disabled or self.read_only or self.type in BARRED_TYPES)

    def set_custom_validity(self, message: str) -> None:
        self._custom_validity = message

    def dispatch(self, event: ControlEvent) -> ControlEvent:
        super().dispatch(event)
        if event.bubbles and self.form is not None:
            self.form.dispatch(event)
        return event

    # User interaction

    def blur(self) -> ControlEvent:
        """Move focus away from the control."""
        return self.dispatch(ControlEvent("blur", self, bubbles=True))

    def set_value(self, value: FieldValue) -> ControlEvent:
        """Change the value as a user edit would."""
        self.value = value
        self._dirty = True
        return self.dispatch(ControlEvent("change", self, bubbles=True))

    def set_checked(self, checked: bool = True) -> ControlEvent:
        """Toggle a checkbox or select a radio button as a user would."""
        if checked and self.type == "radio":
            for other in self._radio_group():
                other.checked = False
        self.checked = checked
        self._dirty = True
        return self.dispatch(ControlEvent("change", self, bubbles=True))

    def restore_defaults(self) -> None:
        self.value = self.default_value
        self.checked = self.default_checked
        self._dirty = False
        self._custom_validity = ""

    # Constraint validation

    def _radio_group(self) -> list["Control"]:
        if self.form is None:
            return [self]
        return [
            control
            for control in self.form.controls
            if control.type == "radio" and control.name == self.name
        ]

    def _is_empty(self) -> bool:
        if self._is_list_valued:
            return not self.value
        return self.value is None or self.value == ""

    def _value_missing(self) -> bool:
        if self.type == "radio":
            return any(c.required for c in self._radio_group()) and not any(
                c.checked for c in self._radio_group()
            )
        if not self.required:
            return False
        if self.type == "checkbox":
            return not self.checked
        return self._is_empty()

    def _split_values(self) -> list[str]:
        if self.type == "email" and self.multiple:
            return [part.strip() for part in str(self.value).split(",")]
        return [str(self.value)]

    def _flags(self) -> set[ValidityFlag]:
        flags: set[ValidityFlag] = set()
        if not self.will_validate:
            return flags

        if self._custom_validity:
            flags.add(ValidityFlag.CUSTOM_ERROR)
        if self._value_missing():
            flags.add(ValidityFlag.VALUE_MISSING)
        if self.type in CHECKABLE_TYPES or self._is_empty():
            return flags

        values = self._split_values()
        if self.type == "email" and not all(_EMAIL.fullmatch(v) for v in values):
            flags.add(ValidityFlag.TYPE_MISMATCH)
        if self.type == "url" and not _URL.fullmatch(str(self.value)):
            flags.add(ValidityFlag.TYPE_MISMATCH)

        if self.type in LENGTH_TYPES and self._dirty:
            length = len(str(self.value))
            if self.min_length is not None and length < self.min_length:
                flags.add(ValidityFlag.TOO_SHORT)
            if self.max_length is not None and length > self.max_length:
                flags.add(ValidityFlag.TOO_LONG)

        if self.type in PATTERN_TYPES and self.pattern:
            try:
                pattern = re.compile(self.pattern)
            except re.error:
                pattern = None
            if pattern and not all(pattern.fullmatch(v) for v in values):
                flags.add(ValidityFlag.PATTERN_MISMATCH)

        if self.type in NUMERIC_TYPES or self.type in TEMPORAL_TYPES:
            current = _parse_comparable(self.type, self.value)
            if current is None:
                flags.add(ValidityFlag.BAD_INPUT)
                return flags

            lower = _parse_comparable(self.type, self.min)
            upper = _parse_comparable(self.type, self.max)
            if lower is not None and current < lower:
                flags.add(ValidityFlag.RANGE_UNDERFLOW)
            if upper is not None and current > upper:
                flags.add(ValidityFlag.RANGE_OVERFLOW)

            if self.type in NUMERIC_TYPES and self.step != "any":
                step = _parse_number(self.step) if self.step is not None else 1.0
                if step and step > 0:
                    base = lower if lower is not None else 0.0
                    quotient = (current - base) / step
                    if not math.isclose(quotient, round(quotient), abs_tol=1e-9):
                        flags.add(ValidityFlag.STEP_MISMATCH)

        return flags

    @property
    def validity(self) -> ValidityState:
        return ValidityState(flags=frozenset(self._flags()))

    @property
    def validation_message(self) -> str:
        """Platform text for the highest-priority violation, empty when valid."""
        flag = self.validity.first()
        if flag is None:
            return ""
        if flag is ValidityFlag.CUSTOM_ERROR:
            return self._custom_validity

        overrides = self.form.messages if self.form is not None else {}
        if overrides.get(flag):
            # Caller-supplied text is shown verbatim
            return overrides[flag]

        template = TYPE_MESSAGES.get((flag, self.type)) or DEFAULT_MESSAGES[flag]
        return template.format(
            min_length=self.min_length,
            max_length=self.max_length,
            min=self.min,
            max=self.max,
        )

    def check_validity(self) -> bool:
        """
        Evaluate the control's constraints.

        Returns:
            True if no flag is set; an ``invalid`` notification is dispatched otherwise
        """
        valid = self.validity.valid
        if not valid:
            self.dispatch(ControlEvent("invalid", self))
        return valid


class SubmitControl(EventTarget):
    """A submit button, optionally carrying a name/value pair."""

    def __init__(
        self,
        name: str = "",
        value: str = "",
        *,
        form_no_validate: bool = False,
    ):
        super().__init__()
        self.name = name
        self.value = value
        self.type = "submit"
        self.form_no_validate = form_no_validate
        self.form: Form | None = None

    @classmethod
    def from_attributes(cls, attributes: ButtonAttributes) -> "SubmitControl":
        """Render button attributes, wiring their click handler."""
        button = cls(
            attributes.name,
            attributes.value,
            form_no_validate=attributes.form_no_validate,
        )
        if attributes.on_click is not None:
            button.add_listener("click", attributes.on_click)
        return button

    def __repr__(self) -> str:
        return f"SubmitControl(name={self.name!r}, value={self.value!r})"

    def click(self) -> bool:
        """
        Activate the button.

        Returns:
            True if the form submission went through
        """
        event = self.dispatch(ControlEvent("click", self))
        if event.default_prevented or self.form is None:
            return False
        return self.form.request_submit(self)


@dataclass
class ControlGroup:
    """Subset of a form's controls, in document order."""

    controls: list[Control]


class Form(EventTarget):
    """A form element holding controls in document order."""

    def __init__(
        self,
        *elements: Control | SubmitControl,
        no_validate: bool = False,
        messages: dict[ValidityFlag, str] | None = None,
    ):
        super().__init__()
        self.no_validate = no_validate
        self.messages = dict(messages or {})
        self.elements: list[Control | SubmitControl] = []
        for element in elements:
            self.append(element)

    def append(self, element: Control | SubmitControl) -> None:
        """Mount an element at the end of the form."""
        element.form = self
        self.elements.append(element)

    def remove(self, element: Control | SubmitControl) -> None:
        """Unmount an element."""
        self.elements.remove(element)
        element.form = None

    @property
    def controls(self) -> list[Control]:
        return [element for element in self.elements if isinstance(element, Control)]

    def get(self, name: Address) -> Control | None:
        for control in self.controls:
            if control.name == name:
                return control
        return None

    def subtree(self, address: Address) -> ControlGroup:
        """Controls at ``address`` or nested anywhere below it."""
        return ControlGroup(
            controls=[
                control
                for control in self.controls
                if control.name == address
                or control.name.startswith(f"{address}.")
                or control.name.startswith(f"{address}[")
            ]
        )

    def check_validity(self) -> bool:
        """Evaluate every control; the platform's own pre-submission pass."""
        results = [control.check_validity() for control in self.controls]
        return all(results)

    def request_submit(self, submitter: SubmitControl | None = None) -> bool:
        """
        Request submission, as pressing a submit button does.

        Params:
            submitter: Button that triggered the submission, if any

        Returns:
            True if the submission proceeded
        """
        if not self.no_validate and not (submitter and submitter.form_no_validate):
            if not self.check_validity():
                logger.debug("Form submission blocked by interactive validation")
                return False

        event = self.dispatch(SubmitEvent("submit", self, submitter=submitter))
        return not event.default_prevented

    def reset(self) -> None:
        for control in self.controls:
            control.restore_defaults()
        self.dispatch(ControlEvent("reset", self))

    def entries(self, submitter: SubmitControl | None = None) -> Iterator[tuple[str, str]]:
        """Yield the name/value pairs a submission would carry."""
        for control in self.controls:
            if not control.name or control.disabled:
                continue
            if control.type in CHECKABLE_TYPES:
                if control.checked:
                    yield control.name, str(control.value)
            elif isinstance(control.value, list):
                for item in control.value:
                    yield control.name, item
            else:
                yield control.name, "" if control.value is None else str(control.value)
        if submitter is not None and submitter.name:
            yield submitter.name, submitter.value
