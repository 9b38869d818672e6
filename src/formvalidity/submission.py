"""
Submission decoding.

Receiving-side counterpart of structural actions: rebuilds the nested value
of a submission from its address-named pairs and applies a structural
directive to it. Submitted values are kept verbatim as strings.
"""

import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

from formvalidity.core.path_utils import parse_address
from formvalidity.core.types import AddressSegment
from formvalidity.lists.directive import Insert, StructuralAction, decode_directive
from formvalidity.settings import DEFAULT_SETTINGS, FormValiditySettings

logger = logging.getLogger(__name__)


@dataclass
class Submission:
    """A decoded submission.

    ``state`` is ``"modified"`` when the submission only carried a structural
    action and must be rendered again rather than committed.
    """

    value: dict[str, Any]
    action: StructuralAction | None = None
    state: Literal["submitted", "modified"] = "submitted"


def _container_for(segment: AddressSegment) -> Any:
    return [] if isinstance(segment, int) else {}


def _child(container: Any, segment: AddressSegment, next_segment: AddressSegment) -> Any:
    if isinstance(segment, int):
        while len(container) <= segment:
            container.append(None)
        if container[segment] is None:
            container[segment] = _container_for(next_segment)
        return container[segment]
    return container.setdefault(segment, _container_for(next_segment))


def _assign(container: Any, segment: AddressSegment, value: str) -> None:
    if isinstance(segment, int):
        while len(container) <= segment:
            container.append(None)
        container[segment] = value
        return

    # Repeated names (checkbox groups, multi-selects) collect into a list
    if segment in container:
        existing = container[segment]
        if isinstance(existing, list):
            existing.append(value)
        else:
            container[segment] = [existing, value]
    else:
        container[segment] = value


def unflatten_entries(entries: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """
    Rebuild a nested value from address-named pairs.

    Params:
        entries: Name/value pairs in submission order

    Returns:
        Nested dicts and lists keyed by the address segments

    Raises:
        PathValidationError: If a name is not a valid address
        TypeError: If two names disagree on whether a segment is a key or an index
    """
    root: dict[str, Any] = {}
    for name, value in entries:
        segments = parse_address(name)
        container: Any = root
        for segment, next_segment in zip(segments, segments[1:]):
            container = _child(container, segment, next_segment)
            if not isinstance(container, dict | list) or (
                isinstance(next_segment, int) != isinstance(container, list)
            ):
                raise TypeError(f"Conflicting structure at '{name}'")
        _assign(container, segments[-1], value)
    return root


def apply_structural_action(value: dict[str, Any], action: StructuralAction) -> dict[str, Any]:
    """
    Apply a structural action to a nested value.

    Params:
        value: Nested value as returned by ``unflatten_entries``
        action: Insert or Remove addressed to a list within the value

    Returns:
        A new value with the addressed list grown by one empty element, or
        with the element removed; out-of-range removals leave it unchanged
    """
    result = copy.deepcopy(value)
    segments = parse_address(action.target)

    container: Any = result
    for segment, next_segment in zip(segments, segments[1:]):
        container = _child(container, segment, next_segment)

    last = segments[-1]
    if isinstance(last, int):
        while len(container) <= last:
            container.append(None)
        if not isinstance(container[last], list):
            container[last] = []
        items = container[last]
    else:
        if not isinstance(container.get(last), list):
            container[last] = []
        items = container[last]

    if isinstance(action, Insert):
        items.append({})
    elif 0 <= action.index < len(items):
        del items[action.index]
    else:
        logger.warning(
            "Ignoring removal of element %d from list '%s' of length %d",
            action.index,
            action.target,
            len(items),
        )
    return result


def parse_submission(
    entries: Iterable[tuple[str, str]],
    settings: FormValiditySettings = DEFAULT_SETTINGS,
) -> Submission:
    """
    Decode a submission, applying its structural directive if it carries one.

    Params:
        entries: Name/value pairs in submission order
        settings: Settings providing the reserved directive name

    Returns:
        The decoded submission
    """
    fields = []
    directive = None
    for name, value in entries:
        if name == settings.directive_name:
            directive = value
        else:
            fields.append((name, value))

    value = unflatten_entries(fields)
    if directive is None:
        return Submission(value=value)

    action = decode_directive(directive)
    if action is None:
        return Submission(value=value, state="modified")
    return Submission(
        value=apply_structural_action(value, action), action=action, state="modified"
    )
