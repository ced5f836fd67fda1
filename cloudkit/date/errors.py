"""
Errors raised by the date codec subsystem.

Both are ValueError subclasses: a rejected date string is a local,
non-retryable input-validation failure.
"""

from typing import Optional


class MalformedInputError(ValueError):
    """Input does not conform to the expected wire grammar"""


class MalformedDateError(MalformedInputError):
    """
    Date string that cannot be parsed under a wire format.

    Attributes:
        value: The rejected input
        wire_format: The WireFormat it was checked against (if known)
    """

    def __init__(self, value, wire_format=None, reason: Optional[str] = None):
        self.value = value
        self.wire_format = wire_format
        self.reason = reason

        target = wire_format.name if wire_format is not None else "date"
        message = f"Malformed {target} string: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
