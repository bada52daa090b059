"""
Cross-entity validation of a typed pricing.

Checks run in a fixed order and stop at the first violation:

1. name uniqueness of features, usage limits, plans and add-ons;
2. each plan, in declaration order, against the root features and usage limits;
3. the features linked by each usage limit;
4. each add-on, in declaration order, against plans, features, usage limits
   and the other add-ons.
"""
from typing import Dict, Iterable, List, Sequence

from ..document import describe, is_kind
from ..errors import ValidationError
from ..models.pricing import VALUE_KINDS, AddOn, Feature, Plan, Pricing, UsageLimit


class PricingValidator:
    """Enforces the referential invariants of a structurally valid ``Pricing``."""

    def validate(self, pricing: Pricing) -> Pricing:
        self._check_unique_names(pricing)

        for plan in pricing.plans:
            self._check_plan(plan, pricing.features, pricing.usage_limits)

        feature_names = {feature.name for feature in pricing.features}
        for usage_limit in pricing.usage_limits:
            for linked in usage_limit.linked_features:
                if linked not in feature_names:
                    raise ValidationError(
                        f"Usage limit '{usage_limit.name}' is linked to unknown feature '{linked}'",
                        entity=usage_limit.name,
                    )

        add_on_names = {add_on.name for add_on in pricing.add_ons}
        plan_names = {plan.name for plan in pricing.plans}
        usage_limit_names = {usage_limit.name for usage_limit in pricing.usage_limits}
        for add_on in pricing.add_ons:
            self._check_add_on(add_on, plan_names, feature_names, usage_limit_names, add_on_names)

        return pricing

    def _check_unique_names(self, pricing: Pricing) -> None:
        self._check_unique("feature", (feature.name for feature in pricing.features))
        self._check_unique("usage limit", (usage_limit.name for usage_limit in pricing.usage_limits))
        self._check_unique("plan", (plan.name for plan in pricing.plans))
        self._check_unique("add-on", (add_on.name for add_on in pricing.add_ons))

        feature_names = {feature.name for feature in pricing.features}
        for usage_limit in pricing.usage_limits:
            if usage_limit.name in feature_names:
                raise ValidationError(
                    f"'{usage_limit.name}' is declared both as a feature and as a usage limit",
                    entity=usage_limit.name,
                )

    @staticmethod
    def _check_unique(kind: str, names: Iterable[str]) -> None:
        seen = set()
        for name in names:
            if name in seen:
                raise ValidationError(f"Duplicate {kind} name '{name}'", entity=name)
            seen.add(name)

    def _check_plan(self, plan: Plan, features: List[Feature], usage_limits: List[UsageLimit]) -> None:
        self._check_same_keys(plan.name, "feature", plan.features, [feature.name for feature in features])
        self._check_same_keys(
            plan.name, "usage limit", plan.usage_limits, [usage_limit.name for usage_limit in usage_limits]
        )

        for declared in list(features) + list(usage_limits):
            values = plan.features if isinstance(declared, Feature) else plan.usage_limits
            value = values[declared.name]
            if not is_kind(value, VALUE_KINDS[declared.value_type]):
                raise ValidationError(
                    f"Plan '{plan.name}' gives '{declared.name}' {describe(value)} value "
                    f"but its valueType is {declared.value_type}",
                    entity=plan.name,
                )

    @staticmethod
    def _check_same_keys(plan_name: str, kind: str, values: Dict[str, object], expected: Sequence[str]) -> None:
        for name in expected:
            if name not in values:
                raise ValidationError(f"Plan '{plan_name}' does not declare {kind} '{name}'", entity=plan_name)
        expected_names = set(expected)
        for name in values:
            if name not in expected_names:
                raise ValidationError(f"Plan '{plan_name}' declares unknown {kind} '{name}'", entity=plan_name)

    def _check_add_on(self, add_on: AddOn, plan_names, feature_names, usage_limit_names, add_on_names) -> None:
        for plan_name in add_on.available_for:
            if plan_name not in plan_names:
                raise ValidationError(
                    f"Add-on '{add_on.name}' is available for unknown plan '{plan_name}'", entity=add_on.name
                )

        for name in add_on.features:
            if name not in feature_names:
                raise ValidationError(f"Add-on '{add_on.name}' declares unknown feature '{name}'", entity=add_on.name)
        for name in list(add_on.usage_limits) + list(add_on.usage_limits_extensions):
            if name not in usage_limit_names:
                raise ValidationError(
                    f"Add-on '{add_on.name}' declares unknown usage limit '{name}'", entity=add_on.name
                )

        self._check_relations(add_on, add_on_names)

    @staticmethod
    def _check_relations(add_on: AddOn, add_on_names) -> None:
        for relation, targets in (("depends on", add_on.depends_on), ("excludes", add_on.excludes)):
            for target in targets:
                if target not in add_on_names:
                    raise ValidationError(
                        f"Add-on '{add_on.name}' {relation} unknown add-on '{target}'", entity=add_on.name
                    )

        if add_on.name in add_on.depends_on:
            raise ValidationError(f"Add-on '{add_on.name}' cannot depend on itself", entity=add_on.name)
        if add_on.name in add_on.excludes:
            raise ValidationError(f"Add-on '{add_on.name}' cannot exclude itself", entity=add_on.name)

        excluded = set(add_on.excludes)
        for target in add_on.depends_on:
            if target in excluded:
                raise ValidationError(
                    f"Add-on '{add_on.name}' both depends on and excludes add-on '{target}'", entity=add_on.name
                )
