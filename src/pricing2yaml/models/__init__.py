"""
Typed pricing models.
"""
from .pricing import VALUE_KINDS, AddOn, Feature, Plan, Pricing, UsageLimit

__all__ = ["VALUE_KINDS", "AddOn", "Feature", "Plan", "Pricing", "UsageLimit"]
