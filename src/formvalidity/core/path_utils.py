"""
Address resolution utilities for form-validity.

An address identifies one control within a rendered form. Root keys are
bare, nesting inside a fieldset appends ``.<key>`` and nesting inside a list
element appends ``[<index>]``:

    resolve("", "owner")            -> "owner"
    resolve("owner", "email")       -> "owner.email"
    resolve_indexed("tasks", 2)     -> "tasks[2]"
    resolve("tasks[2]", "title")    -> "tasks[2].title"
"""

import re
from dataclasses import dataclass

from formvalidity.core.types import Address, AddressSegment
from formvalidity.exceptions import PathValidationError

_RESERVED_KEY_CHARS = frozenset(".[]")
_SEGMENT_PATTERN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def validate_key(key: str) -> None:
    """
    Validate a field key before it is used to build an address.

    Params:
        key: Field key, unique within its parent fieldset

    Raises:
        PathValidationError: If the key is empty or contains separator characters
    """
    if not key or not isinstance(key, str):
        raise PathValidationError(key, "field key must be a non-empty string")
    if _RESERVED_KEY_CHARS.intersection(key):
        raise PathValidationError(key, "field key cannot contain '.', '[' or ']'")


def resolve(parent_address: Address, key: str) -> Address:
    """
    Resolve a field key against its parent address.

    Params:
        parent_address: Address of the enclosing fieldset, empty for the form root
        key: Field key within the parent

    Returns:
        ``key`` at the root, ``parent_address.key`` otherwise
    """
    validate_key(key)
    if not parent_address:
        return key
    return f"{parent_address}.{key}"


def resolve_indexed(list_address: Address, index: int) -> Address:
    """
    Resolve the address of one element of a list of fieldsets.

    Params:
        list_address: Address of the list field
        index: Positional index of the element

    Returns:
        ``list_address[index]``

    Raises:
        PathValidationError: If the list address is empty or the index is not a non-negative integer
    """
    if not list_address:
        raise PathValidationError(list_address, "list address must be non-empty")
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise PathValidationError(
            f"{list_address}[{index}]", "index must be a non-negative integer"
        )
    return f"{list_address}[{index}]"


def last_segment(address: Address) -> str:
    """
    Recover the original field key from a fully-qualified address.

    Only ``.`` separates segments here, so a leaf inside a list element
    (``tasks[0].title``) maps back to ``title``.

    Params:
        address: Fully-qualified control address

    Returns:
        Substring after the last ``.``, or the whole address at the root
    """
    return address[address.rfind(".") + 1 :]


def parent_address(address: Address) -> Address:
    """Return the address of the enclosing fieldset, empty at the root."""
    index = address.rfind(".")
    if index == -1:
        return ""
    return address[:index]


def list_address(element_address: Address) -> Address:
    """
    Strip the trailing index from a list element address.

    Params:
        element_address: Address such as ``tasks[2]``

    Returns:
        The list address, ``tasks``

    Raises:
        PathValidationError: If the address does not end with an index
    """
    if not element_address.endswith("]") or "[" not in element_address:
        raise PathValidationError(element_address, "not a list element address")
    return element_address[: element_address.rfind("[")]


def parse_address(address: Address) -> list[AddressSegment]:
    """
    Split an address into its keys and list indices.

    Params:
        address: Address string, e.g. ``tasks[1].tags[0]``

    Returns:
        Segments, e.g. ``["tasks", 1, "tags", 0]``

    Raises:
        PathValidationError: If the address is empty or malformed
    """
    if not address:
        raise PathValidationError(address, "address must be non-empty")

    segments: list[AddressSegment] = []
    position = 0
    expect_key = True
    while position < len(address):
        if address[position] == "." and not expect_key:
            position += 1
            expect_key = True
            continue

        match = _SEGMENT_PATTERN.match(address, position)
        if match is None:
            raise PathValidationError(address, f"unexpected character at {position}")

        key, index = match.groups()
        if key is not None:
            if not expect_key:
                raise PathValidationError(address, "missing '.' before key")
            segments.append(key)
        else:
            if expect_key and segments:
                raise PathValidationError(address, "empty segment before index")
            if not segments:
                raise PathValidationError(address, "address cannot start with an index")
            segments.append(int(index))
        expect_key = False
        position = match.end()

    if expect_key:
        raise PathValidationError(address, "address cannot end with '.'")
    return segments


def format_address(segments: list[AddressSegment]) -> Address:
    """Inverse of ``parse_address``."""
    address = ""
    for segment in segments:
        if isinstance(segment, int):
            address = resolve_indexed(address, segment)
        else:
            address = resolve(address, segment)
    return address


@dataclass
class AddressComponents:
    """Result of splitting an address at its last separator."""

    parent: Address
    key: str
    index: int | None

    @classmethod
    def split(cls, address: Address) -> "AddressComponents":
        """
        Split an address into its parent address and final key or index.

        Params:
            address: Address to split

        Returns:
            AddressComponents with either ``key`` set (fieldset member) or
            ``index`` set (list element)

        Examples:
            "owner.email" -> AddressComponents("owner", "email", None)
            "tasks[2]"    -> AddressComponents("tasks", "", 2)
        """
        segments = parse_address(address)
        last = segments[-1]
        parent = format_address(segments[:-1])
        if isinstance(last, int):
            return cls(parent=parent, key="", index=last)
        return cls(parent=parent, key=last, index=None)
