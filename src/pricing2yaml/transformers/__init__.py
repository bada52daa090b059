"""
Transformers from untyped pricing documents to typed models.
"""
from .pricing_mapper import PricingMapper

__all__ = ["PricingMapper"]
