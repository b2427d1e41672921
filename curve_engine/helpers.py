"""Bootstrap helpers: market instruments exposed to a curve-fitting solver.

A helper binds a market quote to a synthetic instrument priced on a trial
curve. The solver (not part of this package) adjusts the trial curve until
``implied_quote()`` matches ``quote()`` for every helper, walking the
helpers in order of their latest relevant date (see :func:`sort_helpers`).

Helpers do *not* observe the trial curve: the solver changes it at every
iteration and asks for a fresh implied quote only when it needs one, so
``implied_quote()`` forces the recalculation itself.
"""

import logging
import weakref

import QuantLib as ql

from .engines import DiscountingBondEngine
from .errors import ConfigurationError, StateError
from .handle import RelinkableHandle, as_quote_handle
from .instruments import FixedRateBond, ZeroCouponBond
from .observable import Observable, Observer
from .settings import resolve
from .utils import DateUtils, thirty360_usa

logger = logging.getLogger(__name__)


class BootstrapHelper(Observable, Observer):
    """Base helper: market quote, trial curve, and the relevant dates.

    Notifications of the quote (and of the evaluation date, for helpers
    registering with it) are forwarded to the helper's own observers.
    """

    def __init__(self, quote):
        super().__init__()
        self._quote = as_quote_handle(quote)
        self._term_structure = None
        self._earliest_date = None
        self._latest_date = None
        self.register_with(self._quote)

    def quote(self):
        return self._quote

    def term_structure(self):
        """Return the bound trial curve, or None while unbound."""
        if self._term_structure is None:
            return None
        return self._term_structure()

    def set_term_structure(self, term_structure):
        """Bind the trial curve. The helper only borrows it.

        Only a weak reference is kept: the caller must hold the curve alive
        for as long as it asks for implied quotes.
        """
        if term_structure is None:
            raise ConfigurationError("null term structure given")
        self._term_structure = weakref.ref(term_structure)

    def earliest_date(self):
        return self._earliest_date

    def latest_relevant_date(self):
        return self._latest_date

    def implied_quote(self):
        raise NotImplementedError

    def quote_error(self):
        """Market quote minus implied quote."""
        return self._quote.value() - self.implied_quote()

    def update(self):
        self.notify_observers()


class BondHelper(BootstrapHelper):
    """Helper calibrating a yield curve to a bond clean price.

    Subclasses describe the bond through ``_make_bond()``; the bond and its
    discounting engine are created when the helper is bound to a trial
    curve.
    """

    def __init__(self, clean_price, settlement_days, settings=None):
        super().__init__(clean_price)
        self._settings = resolve(settings)
        self._settlement_days = int(settlement_days)
        self._bond = None
        self._term_structure_handle = RelinkableHandle()
        self.register_with(self._settings.evaluation_date)

    def settlement_days(self):
        return self._settlement_days

    def bond(self):
        return self._bond

    def set_term_structure(self, term_structure):
        """Bind the trial curve and build the bond priced on it.

        The curve is borrowed, not owned: keep a reference to it, or
        ``implied_quote()`` raises ``StateError`` once it is collected.
        """
        if term_structure is None:
            raise ConfigurationError("null term structure given")
        # Not registered as observer: the solver forces recalculation.
        self._term_structure_handle.link_to(
            term_structure, register_as_observer=False, owns=False
        )
        super().set_term_structure(term_structure)

        self._bond = self._make_bond()
        self._bond.set_pricing_engine(DiscountingBondEngine(self._term_structure_handle))
        logger.debug(
            "%s bound to %s (latest date %s)",
            type(self).__name__, type(term_structure).__name__, self._latest_date,
        )

    def implied_quote(self):
        if self._term_structure is None or self._bond is None:
            raise StateError(
                f"term structure not set: call set_term_structure() on this "
                f"{type(self).__name__} before implied_quote()"
            )
        self._bond.recalculate()
        return self._bond.clean_price()

    def _make_bond(self):
        raise NotImplementedError


class FixedRateBondHelper(BondHelper):
    """Fixed-coupon bond helper.

    Parameters
    ----------
    clean_price : float, Quote or Handle
        Market clean price per 100 of face.
    settlement_days : int
    schedule : QuantLib.Schedule
        Coupon schedule; its end date is the helper's latest relevant date.
    coupons : list[float]
        Coupon rates (the last one is repeated if the list is shorter than
        the schedule).
    payment_day_counter : QuantLib.DayCounter, optional
        Defaults to 30/360 (USA).
    """

    def __init__(self, clean_price, settlement_days, schedule, coupons,
                 payment_day_counter=None, payment_convention=ql.Following,
                 redemption=100.0, issue_date=None, settings=None):
        super().__init__(clean_price, settlement_days, settings)
        self._schedule = schedule
        self._coupons = [float(c) for c in coupons]
        self._payment_day_counter = payment_day_counter or thirty360_usa()
        self._payment_convention = payment_convention
        self._redemption = float(redemption)
        self._issue_date = DateUtils.to_ql_date(issue_date) if issue_date is not None else None

        self._earliest_date = schedule.startDate()
        self._latest_date = schedule.endDate()

    def day_counter(self):
        return self._payment_day_counter

    def frequency(self):
        return schedule_frequency(self._schedule)

    def _make_bond(self):
        return FixedRateBond(
            self._settlement_days,
            100.0,
            self._schedule,
            self._coupons,
            self._payment_day_counter,
            self._payment_convention,
            self._redemption,
            self._issue_date,
            settings=self._settings,
        )


class ZeroCouponBondHelper(BondHelper):
    """Helper on a zero-coupon bond maturing on ``maturity_date``."""

    def __init__(self, clean_price, settlement_days, calendar, maturity_date,
                 day_counter=None, payment_convention=ql.Following,
                 redemption=100.0, issue_date=None, settings=None):
        super().__init__(clean_price, settlement_days, settings)
        self._calendar = calendar
        self._maturity_date = DateUtils.to_ql_date(maturity_date)
        self._day_counter = day_counter or ql.Actual365Fixed()
        self._payment_convention = payment_convention
        self._redemption = float(redemption)
        self._issue_date = DateUtils.to_ql_date(issue_date) if issue_date is not None else None

        self._latest_date = calendar.adjust(self._maturity_date, payment_convention)

    def day_counter(self):
        return self._day_counter

    def frequency(self):
        return ql.Once

    def _make_bond(self):
        return ZeroCouponBond(
            self._settlement_days,
            self._calendar,
            100.0,
            self._maturity_date,
            self._payment_convention,
            self._redemption,
            self._issue_date,
            settings=self._settings,
        )


def schedule_frequency(schedule):
    try:
        return schedule.tenor().frequency()
    except RuntimeError:
        # Schedules built from explicit dates carry no tenor
        return ql.NoFrequency


def sort_helpers(helpers):
    """Return the helpers in calibration order (by latest relevant date).

    Two helpers sharing a latest date would pin the same curve node, so
    this is rejected.
    """
    ordered = sorted(helpers, key=lambda h: h.latest_relevant_date())
    for prev, curr in zip(ordered[:-1], ordered[1:]):
        if prev.latest_relevant_date() == curr.latest_relevant_date():
            raise ConfigurationError(
                f"more than one instrument with maturity {curr.latest_relevant_date()}"
            )
    return ordered
