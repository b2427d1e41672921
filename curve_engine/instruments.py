import QuantLib as ql

from .errors import StateError
from .lazy import LazyObject
from .settings import resolve
from .utils import DateUtils


class Instrument(LazyObject):
    """Priced object delegating its valuation to a pricing engine.

    The instrument observes its engine, so a change in whatever the engine
    observes marks the instrument stale.
    """

    def __init__(self, settings=None):
        super().__init__()
        self._settings = resolve(settings)
        self._engine = None
        self._npv = None
        self._settlement_value = None
        self.register_with(self._settings.evaluation_date)

    def set_pricing_engine(self, engine):
        if self._engine is not None:
            self.unregister_with(self._engine)
        self._engine = engine
        if engine is not None:
            self.register_with(engine)
        # Results now belong to the previous engine.
        self._calculated = False
        self.notify_observers()

    def is_expired(self):
        raise NotImplementedError

    def arguments(self):
        raise NotImplementedError

    def perform_calculations(self):
        if self.is_expired():
            self._npv = 0.0
            self._settlement_value = 0.0
            return
        if self._engine is None:
            raise StateError("null pricing engine")
        results = self._engine.calculate(self.arguments())
        self._npv = float(results["value"])
        self._settlement_value = float(results["settlement_value"])

    def npv(self):
        self.calculate()
        return self._npv

    def settlement_value(self):
        self.calculate()
        return self._settlement_value


class Bond(Instrument):
    """Bond whose cash flows come from a QuantLib bond.

    QuantLib generates the coupons, their amounts and the accrued interest;
    valuation is left to the pricing engine set on this object, which works
    on this package's curves. Prices are quoted per 100 of face.

    Settlement dates are computed from the session evaluation date rather
    than from QuantLib's global one.
    """

    def __init__(self, ql_bond, face_amount, settings=None):
        super().__init__(settings)
        self._ql_bond = ql_bond
        self._face_amount = float(face_amount)

    def cashflows(self):
        return list(self._ql_bond.cashflows())

    def settlement_date(self, d=None):
        if d is None:
            d = self._settings.evaluation_date.value()
        return self._ql_bond.settlementDate(DateUtils.to_ql_date(d))

    def is_expired(self):
        return all(cf.date() <= self.settlement_date() for cf in self._ql_bond.cashflows())

    def accrued_amount(self, d=None):
        """Accrued interest per 100 of face at ``d`` (settlement date by default)."""
        d = self.settlement_date() if d is None else DateUtils.to_ql_date(d)
        return float(self._ql_bond.accruedAmount(d))

    def arguments(self):
        return {
            "cashflows": self.cashflows(),
            "settlement_date": self.settlement_date(),
        }

    def dirty_price(self):
        return self.settlement_value() * 100.0 / self._face_amount

    def clean_price(self):
        return self.dirty_price() - self.accrued_amount(self.settlement_date())


class FixedRateBond(Bond):
    """Bullet bond paying fixed coupons on a QuantLib schedule.

    ``coupons`` holds one rate per period; the last rate is repeated when
    fewer rates than periods are given. ``redemption`` is per 100 of face.
    """

    def __init__(self, settlement_days, face_amount, schedule, coupons,
                 payment_day_counter, payment_convention=ql.Following,
                 redemption=100.0, issue_date=None, settings=None):
        issue = DateUtils.to_ql_date(issue_date) if issue_date is not None else ql.Date()
        ql_bond = ql.FixedRateBond(
            int(settlement_days),
            float(face_amount),
            schedule,
            [float(c) for c in coupons],
            payment_day_counter,
            payment_convention,
            float(redemption),
            issue,
        )
        super().__init__(ql_bond, face_amount, settings)


class ZeroCouponBond(Bond):
    """Bond paying only its redemption at maturity."""

    def __init__(self, settlement_days, calendar, face_amount, maturity_date,
                 payment_convention=ql.Following, redemption=100.0,
                 issue_date=None, settings=None):
        issue = DateUtils.to_ql_date(issue_date) if issue_date is not None else ql.Date()
        ql_bond = ql.ZeroCouponBond(
            int(settlement_days),
            calendar,
            float(face_amount),
            DateUtils.to_ql_date(maturity_date),
            payment_convention,
            float(redemption),
            issue,
        )
        super().__init__(ql_bond, face_amount, settings)
