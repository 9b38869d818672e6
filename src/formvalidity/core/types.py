"""
Core type definitions for form-validity.

This module contains type aliases shared across the configuration model,
the path resolver and the control bindings.
"""

from collections.abc import Mapping
from typing import Any

# Fully-qualified control name, e.g. "tasks[0].title"
Address = str

# Value handed to or read from a control; option groups carry lists
FieldValue = str | list[str] | None

# Parsed address segment: a field key or a list index
AddressSegment = str | int

# Caller-owned mapping of field key to field description or FieldConfig
FieldTree = Mapping[str, Any]
