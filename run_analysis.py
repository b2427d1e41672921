from pathlib import Path

import QuantLib as ql
from scipy import optimize

from curve_engine.config import AppConfig
from curve_engine.handle import Handle
from curve_engine.helpers import FixedRateBondHelper, ZeroCouponBondHelper, sort_helpers
from curve_engine.quotes import SimpleQuote
from curve_engine.reporting import curve_table, helper_table, knot_table, save_dataframe
from curve_engine.settings import Settings
from curve_engine.termstructures import CapVolatilityVector, FlatForward


def main():
    # -------------------------------------------------------------------------
    # 0. Session
    # -------------------------------------------------------------------------
    cfg = AppConfig(ql.Date(10, 9, 2025), log_level="INFO")
    settings = cfg.apply_global_settings(Settings())
    calendar = ql.TARGET()

    out_dir = Path(__file__).resolve().parent / "outputs"

    # -------------------------------------------------------------------------
    # 1. Cap volatility curve on live quotes
    # -------------------------------------------------------------------------
    print("--- 1. Cap volatility curve ---")
    tenors = ["1Y", "2Y", "3Y", "5Y", "7Y", "10Y"]
    vol_quotes = [SimpleQuote(v) for v in (0.182, 0.201, 0.207, 0.199, 0.188, 0.176)]
    curve = CapVolatilityVector.from_quotes(
        tenors, [Handle(q) for q in vol_quotes],
        settlement_days=2, calendar=calendar, settings=settings,
    )
    if cfg.allow_extrapolation:
        curve.enable_extrapolation()

    print(knot_table(curve).to_string(index=False))
    print(f"vol(4Y) = {curve.volatility(ql.Period(4, ql.Years)):.6f}")

    # A market update marks the curve stale; nothing is recomputed until queried.
    vol_quotes[3].set_value(0.205)
    print(f"after 5Y bump: stale={not curve.is_calculated()}, "
          f"vol(4Y) = {curve.volatility(ql.Period(4, ql.Years)):.6f}")

    # -------------------------------------------------------------------------
    # 2. Bond helpers against a flat trial curve
    # -------------------------------------------------------------------------
    print("\n--- 2. Bond helpers ---")
    today = settings.evaluation_date.value()
    helpers = [ZeroCouponBondHelper(98.9, 2, calendar, today + ql.Period(1, ql.Years), settings=settings)]
    for years, coupon, price in [(3, 0.030, 100.2), (5, 0.035, 100.9), (10, 0.040, 101.5)]:
        schedule = ql.Schedule(
            today, today + ql.Period(years, ql.Years), ql.Period(ql.Annual), calendar,
            ql.Unadjusted, ql.Unadjusted, ql.DateGeneration.Backward, False,
        )
        helpers.append(FixedRateBondHelper(price, 2, schedule, [coupon], settings=settings))
    helpers = sort_helpers(helpers)

    # The solver owns the trial curve and moves its single rate; the helpers
    # only borrow it and are asked for fresh implied quotes explicitly.
    trial_rate = SimpleQuote(0.03)
    trial = FlatForward(Handle(trial_rate), settlement_days=0, calendar=calendar, settings=settings)
    for h in helpers:
        h.set_term_structure(trial)

    def objective(r, helper):
        trial_rate.set_value(r)
        return helper.quote_error()

    lo, hi = cfg.solver_bracket
    print(f"{'MATURITY':<12} | {'QUOTE':<10} | {'FLAT YIELD':<10}")
    print("-" * 40)
    for h in helpers:
        r = optimize.brentq(
            objective, lo, hi, args=(h,),
            xtol=cfg.solver_accuracy, maxiter=cfg.solver_max_evaluations,
        )
        print(f"{h.latest_relevant_date().ISO():<12} | {h.quote().value():<10.4f} | {r:<10.6f}")

    # -------------------------------------------------------------------------
    # 3. Outputs
    # -------------------------------------------------------------------------
    grid = [0.5 * i for i in range(1, 20)]
    save_dataframe(curve_table(curve, grid), out_dir, "cap_vol_curve.csv")
    save_dataframe(helper_table(helpers), out_dir, "helpers_last_fit.csv")
    print(f"\nOutputs written to: {out_dir}")


if __name__ == "__main__":
    main()
