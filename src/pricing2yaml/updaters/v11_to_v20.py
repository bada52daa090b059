"""
Updater from Pricing2Yaml 1.1 to 2.0.

Version 2.0 renames the monthly price to ``price``, turns the single
``linkedFeature`` of a usage limit into a ``linkedFeatures`` list and drops
the ``AddOns``/``Plans`` suffixes from the add-on relation fields.
"""
import copy
from typing import Any, Dict

from ..errors import MigrationError
from .helpers import iter_entries, mapping_section, rename_key

SOURCE_VERSION = "1.1"
TARGET_VERSION = "2.0"

ADD_ON_RENAMES = (
    ("monthlyPrice", "price"),
    ("availableForPlans", "availableFor"),
    ("dependsOnAddOns", "dependsOn"),
    ("excludeAddOns", "excludes"),
)


def v11_to_v20(document: Dict[str, Any]) -> Dict[str, Any]:
    migrated = copy.deepcopy(document)

    plans = mapping_section(migrated, "plans", SOURCE_VERSION)
    for name, plan in list(iter_entries(plans, "plans", SOURCE_VERSION)):
        plans[name] = rename_key(plan, "monthlyPrice", "price", f"plans.{name}", SOURCE_VERSION)

    usage_limits = mapping_section(migrated, "usageLimits", SOURCE_VERSION)
    for name, usage_limit in list(iter_entries(usage_limits, "usageLimits", SOURCE_VERSION)):
        usage_limits[name] = _link_features(usage_limit, f"usageLimits.{name}")

    add_ons = mapping_section(migrated, "addOns", SOURCE_VERSION)
    for name, add_on in list(iter_entries(add_ons, "addOns", SOURCE_VERSION)):
        for old, new in ADD_ON_RENAMES:
            add_on = rename_key(add_on, old, new, f"addOns.{name}", SOURCE_VERSION)
        add_ons[name] = add_on

    migrated["version"] = TARGET_VERSION
    return migrated


def _link_features(usage_limit: Dict[str, Any], path: str) -> Dict[str, Any]:
    updated = rename_key(usage_limit, "linkedFeature", "linkedFeatures", path, SOURCE_VERSION)
    linked = updated.get("linkedFeatures")
    if linked is None or isinstance(linked, list):
        return updated
    if isinstance(linked, str):
        updated["linkedFeatures"] = [linked]
        return updated
    raise MigrationError(
        SOURCE_VERSION, f"'{path}.linkedFeature' must be a feature name, got {type(linked).__name__}"
    )
