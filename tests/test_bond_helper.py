import gc
import math

import pytest
import QuantLib as ql
from scipy import optimize

from curve_engine.errors import ConfigurationError, StateError
from curve_engine.handle import Handle
from curve_engine.helpers import FixedRateBondHelper, ZeroCouponBondHelper, sort_helpers
from curve_engine.observable import Observer
from curve_engine.quotes import SimpleQuote
from curve_engine.termstructures import FlatForward

from conftest import TODAY

DC = ql.Actual365Fixed()


def annual_schedule(years, start=TODAY):
    return ql.Schedule(
        start,
        start + ql.Period(years, ql.Years),
        ql.Period(ql.Annual),
        ql.NullCalendar(),
        ql.Unadjusted,
        ql.Unadjusted,
        ql.DateGeneration.Backward,
        False,
    )


def fixed_helper(settings, price=100.0, years=5, coupon=0.05):
    return FixedRateBondHelper(
        price, 0, annual_schedule(years), [coupon], DC, ql.Unadjusted, settings=settings
    )


def zero_helper(settings, price=90.0, years=3):
    return ZeroCouponBondHelper(
        price, 0, ql.NullCalendar(), TODAY + ql.Period(years, ql.Years), DC,
        ql.Unadjusted, settings=settings,
    )


def closed_form_clean_price(schedule, coupon, rate):
    """Clean price at issue of an annual bond on a flat continuous curve."""
    dates = list(schedule)
    price = 0.0
    for start, end in zip(dates[:-1], dates[1:]):
        t = DC.yearFraction(TODAY, end)
        price += 100.0 * coupon * DC.yearFraction(start, end) * math.exp(-rate * t)
    price += 100.0 * math.exp(-rate * DC.yearFraction(TODAY, dates[-1]))
    return price


class Recorder(Observer):
    def __init__(self):
        super().__init__()
        self.updates = 0

    def update(self):
        self.updates += 1


@pytest.mark.parametrize("make_helper", [fixed_helper, zero_helper])
def test_implied_quote_requires_a_term_structure(make_helper, settings):
    helper = make_helper(settings)
    with pytest.raises(StateError, match="term structure not set"):
        helper.implied_quote()


def test_implied_quote_matches_discounted_cash_flows(settings):
    rate = 0.03
    helper = fixed_helper(settings)
    curve = FlatForward(rate, DC, reference_date=TODAY, settings=settings)
    helper.set_term_structure(curve)

    expected = closed_form_clean_price(annual_schedule(5), 0.05, rate)

    assert helper.implied_quote() == pytest.approx(expected, abs=1e-10)
    assert helper.bond().accrued_amount() == 0.0


def test_zero_coupon_implied_quote(settings):
    rate = 0.04
    helper = zero_helper(settings)
    # The helper holds the curve weakly: keep it alive for the whole test
    curve = FlatForward(rate, DC, reference_date=TODAY, settings=settings)
    helper.set_term_structure(curve)
    gc.collect()
    t = DC.yearFraction(TODAY, TODAY + ql.Period(3, ql.Years))

    assert helper.implied_quote() == pytest.approx(100.0 * math.exp(-rate * t), abs=1e-10)


def test_implied_quote_is_repeatable(settings):
    helper = fixed_helper(settings)
    curve = FlatForward(0.03, DC, reference_date=TODAY, settings=settings)
    helper.set_term_structure(curve)

    first = helper.implied_quote()
    assert helper.implied_quote() == first
    assert helper.implied_quote() == first


def test_helper_does_not_observe_the_trial_curve(settings):
    rate = SimpleQuote(0.03)
    curve = FlatForward(Handle(rate), DC, reference_date=TODAY, settings=settings)
    helper = fixed_helper(settings)
    helper.set_term_structure(curve)
    p1 = helper.implied_quote()
    rec = Recorder()
    rec.register_with(helper)

    # A solver step moves the trial curve...
    rate.set_value(0.04)

    # ...which neither invalidates the bond nor notifies the helper
    assert helper.bond().is_calculated()
    assert rec.updates == 0
    assert not curve.is_calculated()

    # ...until the solver explicitly asks for a fresh implied quote.
    p2 = helper.implied_quote()
    assert p2 < p1
    assert p2 == pytest.approx(closed_form_clean_price(annual_schedule(5), 0.05, 0.04), abs=1e-10)


def test_helper_forwards_market_quote_changes(settings):
    quote = SimpleQuote(101.0)
    helper = FixedRateBondHelper(Handle(quote), 0, annual_schedule(5), [0.05], DC, settings=settings)
    rec = Recorder()
    rec.register_with(helper)

    quote.set_value(100.5)

    assert rec.updates == 1
    assert helper.quote().value() == 100.5


def test_relinking_to_a_new_trial_curve(settings):
    helper = fixed_helper(settings)
    low = FlatForward(0.02, DC, reference_date=TODAY, settings=settings)
    high = FlatForward(0.06, DC, reference_date=TODAY, settings=settings)

    helper.set_term_structure(low)
    p_low = helper.implied_quote()
    helper.set_term_structure(high)
    p_high = helper.implied_quote()

    assert helper.term_structure() is high
    assert p_high < p_low


def test_helper_only_borrows_the_trial_curve(settings):
    helper = fixed_helper(settings)
    curve = FlatForward(0.03, DC, reference_date=TODAY, settings=settings)
    helper.set_term_structure(curve)
    helper.implied_quote()

    del curve
    gc.collect()

    assert helper.term_structure() is None
    with pytest.raises(StateError):
        helper.implied_quote()


def test_descriptive_accessors(settings):
    helper = fixed_helper(settings, years=7)

    assert helper.latest_relevant_date() == TODAY + ql.Period(7, ql.Years)
    assert helper.earliest_date() == TODAY
    assert helper.frequency() == ql.Annual
    assert helper.day_counter().name() == DC.name()
    assert helper.settlement_days() == 0
    assert zero_helper(settings).frequency() == ql.Once


def test_quote_error_vanishes_at_the_fitted_rate(settings):
    """Tiny external solver: fit a flat rate to one helper."""
    rate = SimpleQuote(0.0)
    curve = FlatForward(Handle(rate), DC, reference_date=TODAY, settings=settings)
    helper = fixed_helper(settings, price=98.0)
    helper.set_term_structure(curve)

    def objective(r):
        rate.set_value(r)
        return helper.quote_error()

    fitted = optimize.brentq(objective, -0.05, 0.5, xtol=1e-14)

    assert helper.implied_quote() == pytest.approx(98.0, abs=1e-8)
    assert fitted > 0.05


def test_sort_helpers_orders_by_latest_date(settings):
    h5, h2, h3 = fixed_helper(settings, years=5), fixed_helper(settings, years=2), zero_helper(settings, years=3)

    assert sort_helpers([h5, h2, h3]) == [h2, h3, h5]


def test_sort_helpers_rejects_duplicate_dates(settings):
    with pytest.raises(ConfigurationError, match="more than one instrument"):
        sort_helpers([fixed_helper(settings, years=3), zero_helper(settings, years=3)])


def test_null_term_structure_is_rejected(settings):
    with pytest.raises(ConfigurationError):
        fixed_helper(settings).set_term_structure(None)
