"""
Pricing2Yaml: parse, update and validate SaaS pricing documents.
"""
from .errors import (
    MigrationError,
    MissingVersionError,
    PricingError,
    SchemaError,
    UnsupportedVersionError,
    ValidationError,
)
from .models import AddOn, Feature, Plan, Pricing, UsageLimit
from .version_manager import LATEST_PRICING2YAML_VERSION
from .yaml_utils import retrieve_pricing_from_path, retrieve_pricing_from_yaml

__all__ = [
    "LATEST_PRICING2YAML_VERSION",
    "AddOn",
    "Feature",
    "MigrationError",
    "MissingVersionError",
    "Plan",
    "Pricing",
    "PricingError",
    "SchemaError",
    "UnsupportedVersionError",
    "UsageLimit",
    "ValidationError",
    "retrieve_pricing_from_path",
    "retrieve_pricing_from_yaml",
]
