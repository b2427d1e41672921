"""Tabular views of curves and helpers, for inspection and reports.

The functions return ``pandas.DataFrame`` objects; ``save_dataframe``
persists them as CSV.
"""

from pathlib import Path

import pandas as pd


def ensure_dir(path):
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def curve_table(curve, times, extrapolate=False):
    """Sample a volatility curve on ``times``."""
    rows = []
    for t in times:
        rows.append({"time": float(t), "volatility": curve.volatility(float(t), extrapolate=extrapolate)})
    return pd.DataFrame(rows, columns=["time", "volatility"])


def knot_table(curve):
    """Option tenors, dates, times and volatilities of a CapVolatilityVector."""
    return pd.DataFrame(
        {
            "tenor": [str(p) for p in curve.option_tenors()],
            "date": [d.ISO() for d in curve.option_dates()],
            "time": curve.option_times(),
            "volatility": curve.volatilities(),
        }
    )


def helper_table(helpers):
    """Market vs implied quote for each bound helper, in the order given."""
    rows = []
    for h in helpers:
        if h.term_structure() is None:
            continue
        implied = h.implied_quote()
        market = h.quote().value()
        rows.append(
            {
                "helper": type(h).__name__,
                "latest_date": h.latest_relevant_date().ISO(),
                "quote": market,
                "implied_quote": implied,
                "error": market - implied,
            }
        )
    return pd.DataFrame(rows, columns=["helper", "latest_date", "quote", "implied_quote", "error"])


def save_dataframe(df, output_dir, filename):
    out = ensure_dir(output_dir)
    path = out / filename
    df.to_csv(path, index=False)
    return path
