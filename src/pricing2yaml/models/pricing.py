"""
Pricing data models for Pricing2Yaml.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Optional, Union

Price = Union[int, float, str, None]


@dataclass
class Feature:
    """A capability of the SaaS whose value each plan declares."""
    name: str
    value_type: str
    default_value: Any
    description: Optional[str] = None
    type: Optional[str] = None
    tag: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "valueType": self.value_type,
            "defaultValue": self.default_value,
            "type": self.type,
            "tag": self.tag,
        }


@dataclass
class UsageLimit:
    """A quantitative restriction, optionally linked to one or more features."""
    name: str
    value_type: str
    default_value: Any
    description: Optional[str] = None
    unit: Optional[str] = None
    type: Optional[str] = None
    linked_features: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "valueType": self.value_type,
            "defaultValue": self.default_value,
            "unit": self.unit,
            "type": self.type,
            "linkedFeatures": list(self.linked_features),
        }


@dataclass
class Plan:
    """A pricing tier. ``features`` and ``usage_limits`` map names to values."""
    name: str
    features: Dict[str, Any]
    usage_limits: Dict[str, Any] = field(default_factory=dict)
    description: Optional[str] = None
    price: Price = None
    annual_price: Price = None
    unit: Optional[str] = None
    private: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "annualPrice": self.annual_price,
            "unit": self.unit,
            "private": self.private,
            "features": dict(self.features),
            "usageLimits": dict(self.usage_limits),
        }


@dataclass
class AddOn:
    """An optional purchasable unit with relations to other add-ons."""
    name: str
    available_for: List[str] = field(default_factory=list)
    depends_on: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    description: Optional[str] = None
    price: Price = None
    annual_price: Price = None
    unit: Optional[str] = None
    private: bool = False
    features: Dict[str, Any] = field(default_factory=dict)
    usage_limits: Dict[str, Any] = field(default_factory=dict)
    usage_limits_extensions: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "annualPrice": self.annual_price,
            "unit": self.unit,
            "private": self.private,
            "availableFor": list(self.available_for),
            "dependsOn": list(self.depends_on),
            "excludes": list(self.excludes),
            "features": dict(self.features),
            "usageLimits": dict(self.usage_limits),
            "usageLimitsExtensions": dict(self.usage_limits_extensions),
        }


@dataclass
class Pricing:
    """Represents the complete, validated pricing of a SaaS product."""
    saas_name: str
    version: str
    created_at: datetime
    currency: str
    has_annual_payment: bool
    features: List[Feature]
    plans: List[Plan]
    usage_limits: List[UsageLimit] = field(default_factory=list)
    add_ons: List[AddOn] = field(default_factory=list)
    url: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the pricing to a JSON-friendly dictionary."""
        return {
            "saasName": self.saas_name,
            "version": self.version,
            "createdAt": self.created_at.isoformat(),
            "currency": self.currency,
            "hasAnnualPayment": self.has_annual_payment,
            "url": self.url,
            "tags": list(self.tags),
            "features": [feature.to_dict() for feature in self.features],
            "usageLimits": [usage_limit.to_dict() for usage_limit in self.usage_limits],
            "plans": [plan.to_dict() for plan in self.plans],
            "addOns": [add_on.to_dict() for add_on in self.add_ons],
        }


# Python kinds accepted for each declared ``valueType``
VALUE_KINDS = {
    "BOOLEAN": (bool,),
    "NUMERIC": (int, float),
    "TEXT": (str,),
}
