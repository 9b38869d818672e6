"""
Message synthesis from native validity flags.

Exactly one message is produced per evaluation: the highest-priority
violated flag wins, its configured custom message is used when the field
configuration supplies one, and the platform's own text otherwise.
"""

from formvalidity.structure.field_config import ControlConfig
from formvalidity.validity.flags import ValidityFlag, ValidityState

# Constraint attribute whose custom message covers each flag
CONSTRAINT_BY_FLAG: dict[ValidityFlag, str] = {
    ValidityFlag.VALUE_MISSING: "required",
    ValidityFlag.TYPE_MISMATCH: "type",
    ValidityFlag.BAD_INPUT: "type",
    ValidityFlag.TOO_SHORT: "min_length",
    ValidityFlag.TOO_LONG: "max_length",
    ValidityFlag.RANGE_UNDERFLOW: "min",
    ValidityFlag.RANGE_OVERFLOW: "max",
    ValidityFlag.STEP_MISMATCH: "step",
    ValidityFlag.PATTERN_MISMATCH: "pattern",
}


def check_custom_validity(validity: ValidityState, config: ControlConfig) -> str | None:
    """
    Look up the configured message for the highest-priority violation.

    Params:
        validity: Flags currently set on the control
        config: The control's configuration

    Returns:
        The custom message, or None when the control is valid, the winning
        flag is a custom error, or no message was configured for it
    """
    flag = validity.first()
    if flag is None:
        return None

    attribute = CONSTRAINT_BY_FLAG.get(flag)
    if attribute is None:
        return None

    constraint = getattr(config, attribute)
    if constraint is None:
        return None
    return constraint.message


def synthesize_message(
    validity: ValidityState, config: ControlConfig, default_message: str
) -> str:
    """
    Produce the single message shown for a control.

    Params:
        validity: Flags currently set on the control
        config: The control's configuration
        default_message: The platform's message for the current flags

    Returns:
        Empty string when valid, otherwise the custom or default message
    """
    if validity.valid:
        return ""
    return check_custom_validity(validity, config) or default_message
