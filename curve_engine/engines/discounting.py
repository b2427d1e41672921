from .base import PricingEngine


class DiscountingBondEngine(PricingEngine):
    """Discount bond cash flows on a yield curve handle.

    ``value`` is discounted to the curve reference date and only includes
    flows after it; ``settlement_value`` only includes flows after the
    settlement date and is discounted to it. Cash flows are the QuantLib
    ones carried in the instrument arguments.
    """

    def __init__(self, discount_curve):
        super().__init__()
        self._discount_curve = discount_curve
        self.register_with(discount_curve)

    def calculate(self, arguments):
        curve = self._discount_curve.current_link()
        reference = curve.reference_date()
        settlement = arguments["settlement_date"]

        value = 0.0
        settlement_value = 0.0
        for cf in arguments["cashflows"]:
            d = cf.date()
            if d <= reference:
                continue
            pv = cf.amount() * curve.discount(d)
            value += pv
            if d > settlement:
                settlement_value += pv

        return {
            "value": value,
            "settlement_value": settlement_value / curve.discount(settlement),
        }
