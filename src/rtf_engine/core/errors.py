"""Exception types raised by the RTF engine."""


class RtfError(Exception):
    """Base class for engine errors."""


class ValidationError(RtfError, ValueError):
    """Raised when user-supplied input (config, performance, TM events) is invalid."""

    pass


class InvariantViolation(RtfError, AssertionError):
    """
    Raised when internal preconditions are broken.

    Indicates a caller bug (e.g. schedules of different shapes handed to
    the forecast projector), never bad user input.
    """

    pass
