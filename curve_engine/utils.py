import QuantLib as ql
import pandas as pd


def thirty360_usa():
    """Return a 30/360 (USA) day count, falling back to the default 30/360."""

    try:
        return ql.Thirty360(ql.Thirty360.USA)
    except (AttributeError, TypeError):
        return ql.Thirty360()


class DateUtils:
    """Small helpers to keep date/period parsing in one place."""

    @staticmethod
    def to_ql_date(d):
        """Convert common Python date representations into QuantLib.Date."""
        if isinstance(d, ql.Date):
            return d
        if isinstance(d, str):
            d = pd.to_datetime(d).date()
        return ql.Date(d.day, d.month, d.year)

    @staticmethod
    def parse_period(s):
        """Parse strings such as '1Mo', '3Mo', '1Yr', '10Yr', '6M', '1Y'."""
        s = str(s).strip().upper()
        s = s.replace("MONTH", "M").replace("MO", "M")
        s = s.replace("YEAR", "Y").replace("YR", "Y")
        if s.endswith("M") and s[:-1].isdigit():
            return ql.Period(int(s[:-1]), ql.Months)
        if s.endswith("Y") and s[:-1].isdigit():
            return ql.Period(int(s[:-1]), ql.Years)
        # Fallback to QuantLib's parser (e.g. '2W', '10D')
        return ql.Period(s)

    @staticmethod
    def ensure_period(tenor):
        """Convert Period/string/Frequency to QuantLib.Period."""
        if isinstance(tenor, ql.Period):
            return tenor
        if isinstance(tenor, str):
            return DateUtils.parse_period(tenor)
        # QuantLib Frequency is an int enum (e.g. ql.Semiannual)
        return ql.Period(tenor)

    @staticmethod
    def ensure_periods(tenors):
        return [DateUtils.ensure_period(t) for t in tenors]
