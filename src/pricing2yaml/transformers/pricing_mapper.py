from datetime import date, datetime, time
from typing import Any, Dict, List, Tuple

from ..document import (
    expect,
    get_non_empty_string,
    get_optional,
    get_required,
    get_string_list,
    iter_named_mappings,
    join_path,
)
from ..errors import SchemaError
from ..models.pricing import VALUE_KINDS, AddOn, Feature, Plan, Pricing, UsageLimit
from ..version_manager import LATEST_PRICING2YAML_VERSION, normalize_version

FEATURE_VALUE_TYPES = ("BOOLEAN", "NUMERIC", "TEXT")
USAGE_LIMIT_VALUE_TYPES = ("BOOLEAN", "NUMERIC")
INFINITY_ALIASES = (".inf", "Infinity")
PRICE_KINDS = (int, float, str)


def normalize_value(value: Any) -> Any:
    """Read the textual spellings of infinity as ``float('inf')``."""
    if isinstance(value, str) and value.strip() in INFINITY_ALIASES:
        return float("inf")
    return value


class ComponentParser:
    """Base class for parsing the sections of a pricing document."""

    section: str = ""

    def _values(self, owner: Dict[str, Any], key: str, path: str, value_types: Dict[str, str],
                required: bool = False) -> Dict[str, Any]:
        """Unwrap a ``name -> {value: X}`` mapping into ``name -> X``.

        ``value_types`` maps declared feature and usage limit names to their
        ``valueType``; only NUMERIC values read infinity spellings as floats.
        """
        if required:
            section = get_required(owner, key, (dict,), path)
        else:
            section = get_optional(owner, key, (dict,), path, default={})

        section_path = join_path(path, key)
        values = {}
        for name, entry, entry_path in iter_named_mappings(section, section_path):
            value = entry.get("value")
            if value is None:
                raise SchemaError(join_path(entry_path, "value"), "required field is missing")
            if value_types.get(name) == "NUMERIC":
                value = normalize_value(value)
            values[name] = value
        return values


class ValuedComponentParser(ComponentParser):
    """Shared handling of ``valueType``/``defaultValue`` for features and usage limits."""

    value_types: Tuple[str, ...] = ()

    def _value_type(self, body: Dict[str, Any], path: str) -> str:
        value_type = get_required(body, "valueType", (str,), path)
        if value_type not in self.value_types:
            raise SchemaError(
                join_path(path, "valueType"),
                f"must be one of {', '.join(self.value_types)}, got {value_type!r}",
            )
        return value_type

    def _default_value(self, body: Dict[str, Any], path: str, value_type: str) -> Any:
        field_path = join_path(path, "defaultValue")
        value = body.get("defaultValue")
        if value_type == "NUMERIC":
            value = normalize_value(value)
        if value is None:
            raise SchemaError(field_path, "required field is missing")
        return expect(value, VALUE_KINDS[value_type], field_path)


class FeatureParser(ValuedComponentParser):
    """Handles parsing of feature data."""

    section = "features"
    value_types = FEATURE_VALUE_TYPES

    def parse(self, document: Dict[str, Any]) -> List[Feature]:
        features = get_required(document, self.section, (dict,), "")
        if not features:
            raise SchemaError(self.section, "at least one feature must be declared")
        return [
            self._parse_feature(name, body, path)
            for name, body, path in iter_named_mappings(features, self.section)
        ]

    def _parse_feature(self, name: str, body: Dict[str, Any], path: str) -> Feature:
        value_type = self._value_type(body, path)
        return Feature(
            name=name,
            value_type=value_type,
            default_value=self._default_value(body, path, value_type),
            description=get_optional(body, "description", (str,), path),
            type=get_optional(body, "type", (str,), path),
            tag=get_optional(body, "tag", (str,), path),
        )


class UsageLimitParser(ValuedComponentParser):
    """Handles parsing of usage limit data."""

    section = "usageLimits"
    value_types = USAGE_LIMIT_VALUE_TYPES

    def parse(self, document: Dict[str, Any]) -> List[UsageLimit]:
        usage_limits = get_optional(document, self.section, (dict,), "", default={})
        return [
            self._parse_usage_limit(name, body, path)
            for name, body, path in iter_named_mappings(usage_limits, self.section)
        ]

    def _parse_usage_limit(self, name: str, body: Dict[str, Any], path: str) -> UsageLimit:
        value_type = self._value_type(body, path)
        return UsageLimit(
            name=name,
            value_type=value_type,
            default_value=self._default_value(body, path, value_type),
            description=get_optional(body, "description", (str,), path),
            unit=get_optional(body, "unit", (str,), path),
            type=get_optional(body, "type", (str,), path),
            linked_features=get_string_list(body, "linkedFeatures", path) or [],
        )


class PlanParser(ComponentParser):
    """Handles parsing of plan data."""

    section = "plans"

    def parse(self, document: Dict[str, Any], value_types: Dict[str, str]) -> List[Plan]:
        plans = get_required(document, self.section, (dict,), "")
        if not plans:
            raise SchemaError(self.section, "at least one plan must be declared")
        return [
            self._parse_plan(name, body, path, value_types)
            for name, body, path in iter_named_mappings(plans, self.section)
        ]

    def _parse_plan(self, name: str, body: Dict[str, Any], path: str, value_types: Dict[str, str]) -> Plan:
        return Plan(
            name=name,
            features=self._values(body, "features", path, value_types, required=True),
            usage_limits=self._values(body, "usageLimits", path, value_types),
            description=get_optional(body, "description", (str,), path),
            price=normalize_value(get_optional(body, "price", PRICE_KINDS, path)),
            annual_price=normalize_value(get_optional(body, "annualPrice", PRICE_KINDS, path)),
            unit=get_optional(body, "unit", (str,), path),
            private=get_optional(body, "private", (bool,), path, default=False),
        )


class AddOnParser(ComponentParser):
    """Handles parsing of add-on data."""

    section = "addOns"

    def parse(self, document: Dict[str, Any], plans: List[Plan], value_types: Dict[str, str]) -> List[AddOn]:
        add_ons = get_optional(document, self.section, (dict,), "", default={})
        plan_names = [plan.name for plan in plans]
        return [
            self._parse_add_on(name, body, path, plan_names, value_types)
            for name, body, path in iter_named_mappings(add_ons, self.section)
        ]

    def _parse_add_on(self, name: str, body: Dict[str, Any], path: str, plan_names: List[str],
                      value_types: Dict[str, str]) -> AddOn:
        available_for = get_string_list(body, "availableFor", path)
        return AddOn(
            name=name,
            available_for=list(plan_names) if available_for is None else available_for,
            depends_on=self._name_set(body, "dependsOn", path),
            excludes=self._name_set(body, "excludes", path),
            description=get_optional(body, "description", (str,), path),
            price=normalize_value(get_optional(body, "price", PRICE_KINDS, path)),
            annual_price=normalize_value(get_optional(body, "annualPrice", PRICE_KINDS, path)),
            unit=get_optional(body, "unit", (str,), path),
            private=get_optional(body, "private", (bool,), path, default=False),
            features=self._values(body, "features", path, value_types),
            usage_limits=self._values(body, "usageLimits", path, value_types),
            usage_limits_extensions=self._values(body, "usageLimitsExtensions", path, value_types),
        )

    @staticmethod
    def _name_set(body: Dict[str, Any], key: str, path: str) -> List[str]:
        # relations are sets; repeats collapse onto their first occurrence
        return list(dict.fromkeys(get_string_list(body, key, path) or []))


class PricingMapper:
    """Maps a latest-version untyped document onto the typed ``Pricing`` model.

    Only per-field kinds and structural completeness are checked here;
    references between plans, features, usage limits and add-ons are left to
    the semantic validator.
    """

    def __init__(self, latest_version: str = LATEST_PRICING2YAML_VERSION):
        self.latest_version = latest_version
        self.feature_parser = FeatureParser()
        self.usage_limit_parser = UsageLimitParser()
        self.plan_parser = PlanParser()
        self.add_on_parser = AddOnParser()

    def map(self, document: Any) -> Pricing:
        document = expect(document, (dict,), "<root>")

        saas_name = get_non_empty_string(document, "saasName", "")
        version = self._version(document)
        created_at = self._created_at(document)
        currency = get_non_empty_string(document, "currency", "")
        has_annual_payment = get_required(document, "hasAnnualPayment", (bool,), "")

        features = self.feature_parser.parse(document)
        usage_limits = self.usage_limit_parser.parse(document)
        value_types = {item.name: item.value_type for item in features + usage_limits}
        plans = self.plan_parser.parse(document, value_types)
        add_ons = self.add_on_parser.parse(document, plans, value_types)

        return Pricing(
            saas_name=saas_name,
            version=version,
            created_at=created_at,
            currency=currency,
            has_annual_payment=has_annual_payment,
            features=features,
            plans=plans,
            usage_limits=usage_limits,
            add_ons=add_ons,
            url=get_optional(document, "url", (str,), ""),
            tags=get_string_list(document, "tags", "") or [],
        )

    def _version(self, document: Dict[str, Any]) -> str:
        version = normalize_version(get_required(document, "version", (str, int, float), ""))
        if version != self.latest_version:
            raise SchemaError("version", f"expected {self.latest_version}, got {version}")
        return version

    @staticmethod
    def _created_at(document: Dict[str, Any]) -> datetime:
        value = get_required(document, "createdAt", (str, date), "")
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        text = value.strip()
        # fromisoformat only reads the "Z" suffix from Python 3.11 on
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise SchemaError("createdAt", f"must be an ISO 8601 date, got {value!r}") from exc
