from .base import TermStructure
from .volatility import CapFloorTermVolatilityStructure, CapVolatilityVector
from .yields import FlatForward, YieldTermStructure
