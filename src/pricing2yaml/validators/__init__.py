"""
Semantic validators for typed pricings.
"""
from .pricing_validator import PricingValidator

__all__ = ["PricingValidator"]
