"""Exception hierarchy.

All failures are raised where the violated precondition is detected; none
is retried internally.
"""


class CurveEngineError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(CurveEngineError, ValueError):
    """Invalid construction inputs (sizes, knots, reference-date mode)."""


class RangeError(ConfigurationError):
    """A curve was queried outside of its time domain."""


class StateError(CurveEngineError, RuntimeError):
    """An object was used before it reached the required state."""


class NotificationError(CurveEngineError):
    """One or more observers failed while being notified.

    Every observer is notified before this is raised; ``errors`` holds the
    individual exceptions.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"could not notify one or more observers: {details}")
