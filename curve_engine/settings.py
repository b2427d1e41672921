"""Session-wide evaluation date."""

import QuantLib as ql

from .observable import Observable
from .utils import DateUtils


class EvaluationDate(Observable):
    """Observable holding "today" for a session.

    Until a date is set, ``value()`` returns the system date.
    """

    def __init__(self):
        super().__init__()
        self._date = None

    def value(self):
        if self._date is None:
            return ql.Date.todaysDate()
        return self._date

    def set(self, d):
        self._date = DateUtils.to_ql_date(d)
        self.notify_observers()

    def reset(self):
        if self._date is not None:
            self._date = None
            self.notify_observers()


class Settings:
    """State shared by the objects of one pricing/calibration session.

    Objects needing the evaluation date take an optional ``settings``
    argument; when omitted they use :meth:`Settings.default`.
    """

    _default = None

    def __init__(self):
        self.evaluation_date = EvaluationDate()

    @classmethod
    def default(cls):
        if cls._default is None:
            cls._default = cls()
        return cls._default

    def reset(self):
        """Tear down session state (the evaluation date goes back to unset)."""
        self.evaluation_date.reset()


def resolve(settings):
    return settings if settings is not None else Settings.default()
