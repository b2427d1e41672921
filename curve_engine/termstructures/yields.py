import math

import QuantLib as ql

from ..handle import as_quote_handle
from .base import TermStructure


class YieldTermStructure(TermStructure):
    """Interest-rate curve expressed through discount factors."""

    def discount(self, x, extrapolate=False):
        t = self._to_time(x)
        self._check_range(t, extrapolate)
        return self._discount_impl(t)

    def zero_rate(self, x, extrapolate=False):
        """Continuously compounded zero rate."""
        t = self._to_time(x)
        self._check_range(t, extrapolate)
        # Instantaneous rate at the reference date
        dt = t if t > 0.0 else 1.0e-4
        return -math.log(self._discount_impl(dt)) / dt

    def _discount_impl(self, t):
        raise NotImplementedError


class FlatForward(YieldTermStructure):
    """Flat curve at a single (possibly quoted) rate.

    ``rate`` can be a number, a quote, or a quote handle; the curve observes
    it, which makes it a convenient trial curve for a bootstrap solver.
    """

    def __init__(self, rate, day_counter=None, reference_date=None,
                 settlement_days=None, calendar=None,
                 compounding=ql.Continuous, frequency=ql.Annual, settings=None):
        day_counter = day_counter if day_counter is not None else ql.Actual365Fixed()
        super().__init__(day_counter, reference_date, settlement_days, calendar, settings)
        self._rate_handle = as_quote_handle(rate)
        self._compounding = compounding
        self._frequency = frequency
        self._rate = None
        self.register_with(self._rate_handle)

    def max_date(self):
        return ql.Date.maxDate()

    def perform_calculations(self):
        self._rate = ql.InterestRate(
            self._rate_handle.value(), self._day_counter, self._compounding, self._frequency
        )

    def _discount_impl(self, t):
        self.calculate()
        return self._rate.discountFactor(t)
