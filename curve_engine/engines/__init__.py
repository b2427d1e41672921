from .base import PricingEngine
from .discounting import DiscountingBondEngine
