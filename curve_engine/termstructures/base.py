import numbers

import QuantLib as ql

from ..errors import ConfigurationError, RangeError
from ..lazy import LazyObject
from ..settings import resolve
from ..utils import DateUtils


class TermStructure(LazyObject):
    """Base class for curves anchored at a reference date.

    The reference date is either fixed at construction (``reference_date``)
    or floating, i.e. ``settlement_days`` business days after the session's
    evaluation date on ``calendar``. Floating curves observe the evaluation
    date and are marked stale when it changes.

    Parameters
    ----------
    day_counter : QuantLib.DayCounter
        Converts dates into times from the reference date.
    reference_date : QuantLib.Date or datetime.date, optional
    settlement_days : int, optional
        Exactly one of ``reference_date`` and ``settlement_days`` is required.
    calendar : QuantLib.Calendar, optional
        Required for floating reference dates.
    settings : curve_engine.settings.Settings, optional
        Session providing the evaluation date (default session if omitted).
    """

    def __init__(self, day_counter, reference_date=None, settlement_days=None,
                 calendar=None, settings=None):
        super().__init__()
        if (reference_date is None) == (settlement_days is None):
            raise ConfigurationError(
                "exactly one of reference date and settlement days must be given"
            )
        if settlement_days is not None and calendar is None:
            raise ConfigurationError("a calendar is required with settlement days")
        if settlement_days is not None and int(settlement_days) < 0:
            raise ConfigurationError(f"negative settlement days ({settlement_days}) given")

        self._day_counter = day_counter
        self._calendar = calendar
        self._settings = resolve(settings)
        self._extrapolate = False

        if reference_date is not None:
            self._reference_date = DateUtils.to_ql_date(reference_date)
            self._settlement_days = None
        else:
            self._reference_date = None
            self._settlement_days = int(settlement_days)
            self.register_with(self._settings.evaluation_date)

    # ------------------------------------------------------------------
    # Dates and times
    # ------------------------------------------------------------------
    def reference_date(self):
        if self._reference_date is not None:
            return self._reference_date
        today = self._settings.evaluation_date.value()
        return self._calendar.advance(today, ql.Period(self._settlement_days, ql.Days))

    def settlement_days(self):
        return self._settlement_days

    def calendar(self):
        return self._calendar

    def day_counter(self):
        return self._day_counter

    def time_from_reference(self, d):
        return self._day_counter.yearFraction(self.reference_date(), DateUtils.to_ql_date(d))

    def max_date(self):
        raise NotImplementedError

    def max_time(self):
        return self.time_from_reference(self.max_date())

    # ------------------------------------------------------------------
    # Extrapolation and range checks
    # ------------------------------------------------------------------
    def enable_extrapolation(self):
        self._extrapolate = True

    def disable_extrapolation(self):
        self._extrapolate = False

    def allows_extrapolation(self):
        return self._extrapolate

    def _check_range(self, t, extrapolate=False):
        if t < 0.0:
            raise RangeError(f"negative time ({t}) given")
        if extrapolate or self._extrapolate:
            return
        max_time = self.max_time()
        if t > max_time and abs(t - max_time) > 1.0e-12:
            raise RangeError(f"time ({t}) is past max curve time ({max_time})")

    def _to_time(self, x):
        if isinstance(x, ql.Period):
            return self.time_from_reference(self.reference_date() + x)
        if isinstance(x, numbers.Real):
            return float(x)
        return self.time_from_reference(x)

    def perform_calculations(self):
        pass
