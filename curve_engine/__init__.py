"""Lazy market-data propagation for curves and calibration helpers.

This package provides:
- Observable/Observer notifications and lazy, cached recalculation
- Quotes and (relinkable) handles
- Term structures: cap volatility vector (natural cubic spline), flat forward
- Bond bootstrap helpers exposing implied quotes to a calibration solver

Calendars, schedules and day counting come from QuantLib.
"""

from .config import AppConfig
from .errors import ConfigurationError, NotificationError, RangeError, StateError
from .handle import Handle, RelinkableHandle
from .helpers import FixedRateBondHelper, ZeroCouponBondHelper, sort_helpers
from .lazy import LazyObject
from .observable import Observable, Observer
from .quotes import SimpleQuote
from .settings import Settings
from .termstructures import CapVolatilityVector, FlatForward
