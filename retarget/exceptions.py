"""
Exception types raised by the retargeting package.

The difficulty calculation itself never raises for structurally valid
input. Everything here belongs to the layers around it: building a fork
schedule, loading chain configuration and fixtures, and comparing a computed
difficulty against the one a header claims.
"""


class ConfigurationError(ValueError):
    """
    Raised when chain configuration or fixture data is malformed.

    A failed load never affects schedules that were already constructed;
    the error is fatal only to the load operation that raised it.
    """
    pass


class ScheduleError(ConfigurationError):
    """
    Raised when a fork schedule would violate one of its invariants:
    unknown upgrade names, negative heights, activation heights that
    decrease in canonical upgrade order, or a continue without a pause.
    """
    pass


class FixtureError(ConfigurationError):
    """Raised when a difficulty conformance fixture is missing fields or carries bad numbers."""
    pass


class DifficultyMismatchError(ValueError):
    """
    Raised when a header's claimed difficulty differs from the computed one.

    The message carries both values so a header validator can report exactly
    which rule set disagreed.
    """
    pass
