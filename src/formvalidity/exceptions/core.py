"""
Exception classes for form-validity.

Configuration errors are raised at setup time and abort construction of a
form's bindings. Validity errors are never raised: they become message
strings on the affected control bindings.
"""


class FormValidityError(Exception):
    """Base exception for all form-validity errors."""

    pass


class FieldConfigError(FormValidityError):
    """Raised when a field description cannot be normalized into a FieldConfig."""

    def __init__(self, field_key: str, reason: str):
        """
        Initialize the exception.

        Params:
            field_key: Key (or address) of the offending field
            reason: Why the configuration is malformed
        """
        self.field_key = field_key
        self.reason = reason
        super().__init__(f"Invalid configuration for field '{field_key}': {reason}")


class PathValidationError(FormValidityError):
    """Raised when an address or field key is malformed."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: The invalid address or key
            reason: Why the path is invalid
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


class ListNameConflictError(FormValidityError):
    """Raised when list element options disagree on their parent address."""

    def __init__(self, expected: str, found: str):
        """
        Initialize the exception.

        Params:
            expected: Parent address established by the list controller
            found: Conflicting parent address found on an element
        """
        self.expected = expected
        self.found = found
        super().__init__(
            f"Inconsistent list name: expected '{expected}', found '{found}'; "
            "only elements of a single list can share a controller"
        )


class DuplicateAddressError(FormValidityError):
    """Raised when two live controls or list controllers claim the same address."""

    def __init__(self, address: str, owner: str = "a live control"):
        """
        Initialize the exception.

        Params:
            address: The address claimed twice
            owner: What already holds the address
        """
        self.address = address
        self.owner = owner
        super().__init__(f"Address '{address}' is already bound to {owner}")


class DirectiveError(FormValidityError):
    """Raised by the strict directive decoder on a malformed directive value."""

    def __init__(self, value: str, reason: str):
        """
        Initialize the exception.

        Params:
            value: The raw directive value
            reason: Why it could not be decoded
        """
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed structural directive '{value}': {reason}")
