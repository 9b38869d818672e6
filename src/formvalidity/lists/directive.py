"""
Structural directive codec.

A structural action grows or shrinks a list of fieldsets. On the wire it is
a reserved name/value pair carried by a non-validating submit button:

    <list address>:insert
    <list address>:remove:<index>
"""

import logging
import re
from typing import Any

from attrs import frozen

from formvalidity.core.path_utils import parse_address, resolve_indexed
from formvalidity.core.types import Address
from formvalidity.exceptions import DirectiveError, PathValidationError
from formvalidity.settings import DEFAULT_SETTINGS, FormValiditySettings

logger = logging.getLogger(__name__)

INSERT_TAG = "insert"
REMOVE_TAG = "remove"

_DIRECTIVE = re.compile(
    rf"(?P<target>.+):(?:(?P<insert>{INSERT_TAG})|{REMOVE_TAG}:(?P<index>\d+))",
    re.ASCII,
)


@frozen
class Insert:
    """Append one element to the list at ``target``."""

    target: Address


@frozen
class Remove:
    """Remove the element at ``index`` from the list at ``target``."""

    target: Address
    index: int


StructuralAction = Insert | Remove


def encode_directive(action: StructuralAction) -> str:
    """
    Encode a structural action as its directive value.

    Params:
        action: The action to encode

    Returns:
        ``<target>:insert`` or ``<target>:remove:<index>``
    """
    parse_address(action.target)
    if isinstance(action, Insert):
        return f"{action.target}:{INSERT_TAG}"
    resolve_indexed(action.target, action.index)
    return f"{action.target}:{REMOVE_TAG}:{action.index}"


def _decode(value: Any) -> StructuralAction:
    if not isinstance(value, str) or not value:
        raise DirectiveError(str(value), "directive value must be a non-empty string")

    match = _DIRECTIVE.fullmatch(value)
    if match is None:
        raise DirectiveError(value, "expected '<list>:insert' or '<list>:remove:<index>'")

    target = match.group("target")
    try:
        parse_address(target)
    except PathValidationError as e:
        raise DirectiveError(value, e.reason) from e

    if match.group("insert"):
        return Insert(target=target)
    return Remove(target=target, index=int(match.group("index")))


def decode_directive(value: Any, *, strict: bool = False) -> StructuralAction | None:
    """
    Decode a directive value into a structural action.

    Params:
        value: Raw value of the reserved field
        strict: Raise instead of ignoring a malformed value

    Returns:
        The decoded action, or None for a malformed value in non-strict mode

    Raises:
        DirectiveError: If ``strict`` is set and the value is malformed
    """
    try:
        return _decode(value)
    except DirectiveError as e:
        if strict:
            raise
        logger.warning("Ignoring structural directive: %s", e)
        return None


def draft_update(
    name: Address,
    index: int | None = None,
    settings: FormValiditySettings = DEFAULT_SETTINGS,
) -> dict[str, str]:
    """
    Build the reserved name/value pair for a structural action.

    Params:
        name: Address of the list
        index: Element to remove; omitted for an insert
        settings: Settings providing the reserved field name

    Returns:
        Mapping of the reserved field name to the encoded directive
    """
    action = Insert(target=name) if index is None else Remove(target=name, index=index)
    return {settings.directive_name: encode_directive(action)}


def should_skip_validate(
    submitter: Any, settings: FormValiditySettings = DEFAULT_SETTINGS
) -> bool:
    """Whether a submission was triggered by a structural action button."""
    if submitter is None:
        return False
    return getattr(submitter, "name", None) == settings.directive_name
