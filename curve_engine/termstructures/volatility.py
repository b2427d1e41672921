import logging
import numbers

import numpy as np
import QuantLib as ql

from ..errors import ConfigurationError
from ..handle import Handle, as_quote_handle
from ..interpolation import make_interpolation
from ..quotes import Quote
from ..utils import DateUtils
from .base import TermStructure

logger = logging.getLogger(__name__)


class CapFloorTermVolatilityStructure(TermStructure):
    """Cap/floor term volatilities, flat in strike.

    ``volatility`` accepts a time (float), a date, or a tenor; dates and
    tenors are converted to times through the curve day counter.
    """

    def __init__(self, day_counter, reference_date=None, settlement_days=None,
                 calendar=None, business_day_convention=ql.Following, settings=None):
        super().__init__(day_counter, reference_date, settlement_days, calendar, settings)
        self._bdc = business_day_convention

    def business_day_convention(self):
        return self._bdc

    def option_date_from_tenor(self, tenor):
        return self._calendar.advance(
            self.reference_date(), DateUtils.ensure_period(tenor), self._bdc
        )

    def volatility(self, x, strike=None, extrapolate=False):
        if isinstance(x, ql.Period):
            t = self.time_from_reference(self.option_date_from_tenor(x))
        else:
            t = self._to_time(x)
        self._check_range(t, extrapolate)
        return self._volatility_impl(t, strike)

    def _volatility_impl(self, t, strike):
        raise NotImplementedError


class CapVolatilityVector(CapFloorTermVolatilityStructure):
    """Cap volatility curve interpolated over option tenors.

    Volatilities are given either as quotes (``Handle``/``Quote``) or as
    plain numbers, which are wrapped into constant quotes so that every
    variant is recalculated the same way. The reference date is fixed
    (``reference_date``) or floating (``settlement_days``); see
    :class:`TermStructure`.

    The curve observes every volatility quote. Recalculation rebuilds the
    option times, re-reads the quotes and refits a natural cubic spline.

    Raises
    ------
    ConfigurationError
        If the number of tenors and volatilities differ, or if the
        interpolation cannot be built (fewer than four knots, unless there is
        exactly one, or non-increasing option times).
    """

    def __init__(self, option_tenors, volatilities, reference_date=None,
                 settlement_days=None, calendar=None,
                 business_day_convention=ql.Following, day_counter=None,
                 settings=None):
        calendar = calendar if calendar is not None else ql.TARGET()
        day_counter = day_counter if day_counter is not None else ql.Actual365Fixed()
        super().__init__(day_counter, reference_date, settlement_days, calendar,
                         business_day_convention, settings)

        self._option_tenors = DateUtils.ensure_periods(option_tenors)
        volatilities = list(volatilities)
        self._check_inputs(len(volatilities))

        self._vol_handles = [as_quote_handle(v) for v in volatilities]
        self._option_dates = []
        self._option_times = np.zeros(len(self._option_tenors))
        self._volatilities = np.zeros(len(self._vol_handles))
        self._interpolation = None

        for h in self._vol_handles:
            self.register_with(h)
        self.calculate()

    @classmethod
    def from_quotes(cls, option_tenors, quotes, **kwargs):
        """Build a curve following market quotes (handles or quotes)."""
        handles = []
        for q in quotes:
            if not isinstance(q, (Handle, Quote)):
                raise ConfigurationError(f"expected a quote or quote handle, got {q!r}")
            handles.append(as_quote_handle(q))
        return cls(option_tenors, handles, **kwargs)

    @classmethod
    def from_volatilities(cls, option_tenors, volatilities, **kwargs):
        """Build a curve from fixed numeric volatilities."""
        values = []
        for v in volatilities:
            if not isinstance(v, numbers.Real):
                raise ConfigurationError(f"expected a numeric volatility, got {v!r}")
            values.append(float(v))
        return cls(option_tenors, values, **kwargs)

    def _check_inputs(self, n_vols):
        if len(self._option_tenors) != n_vols:
            raise ConfigurationError(
                f"mismatch between number of option tenors ({len(self._option_tenors)}) "
                f"and number of cap volatilities ({n_vols})"
            )

    def perform_calculations(self):
        self._option_dates = [self.option_date_from_tenor(p) for p in self._option_tenors]
        self._option_times = np.array(
            [self.time_from_reference(d) for d in self._option_dates], dtype=float
        )
        self._volatilities = np.array([h.value() for h in self._vol_handles], dtype=float)
        self._interpolation = make_interpolation(self._option_times, self._volatilities)
        logger.debug(
            "Rebuilt cap volatility interpolation on %s tenors (reference %s)",
            len(self._option_tenors), self.reference_date(),
        )

    # ------------------------------------------------------------------
    # Inspectors
    # ------------------------------------------------------------------
    def option_tenors(self):
        return list(self._option_tenors)

    def option_dates(self):
        self.calculate()
        return list(self._option_dates)

    def option_times(self):
        self.calculate()
        return self._option_times.copy()

    def volatilities(self):
        self.calculate()
        return self._volatilities.copy()

    def max_date(self):
        self.calculate()
        return self._option_dates[-1]

    def _volatility_impl(self, t, strike):
        self.calculate()
        return self._interpolation(t)
