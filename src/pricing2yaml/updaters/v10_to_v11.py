"""
Updater from Pricing2Yaml 1.0 to 1.1.

Version 1.0 spreads the creation date over ``day``, ``month`` and ``year``
and lets plans and add-ons give bare values for their features and usage
limits. Version 1.1 uses a single ISO ``createdAt`` and always nests the
value as ``{value: X}``.
"""
import copy
from datetime import date
from typing import Any, Dict

from ..errors import MigrationError
from .helpers import iter_entries, mapping_section

SOURCE_VERSION = "1.0"
TARGET_VERSION = "1.1"

DATE_PARTS = ("day", "month", "year")
PLAN_VALUE_SECTIONS = ("features", "usageLimits")
ADD_ON_VALUE_SECTIONS = ("features", "usageLimits", "usageLimitsExtensions")


def v10_to_v11(document: Dict[str, Any]) -> Dict[str, Any]:
    migrated = _combine_creation_date(copy.deepcopy(document))

    for name, plan in iter_entries(mapping_section(migrated, "plans", SOURCE_VERSION), "plans", SOURCE_VERSION):
        for key in PLAN_VALUE_SECTIONS:
            _wrap_values(plan, key, f"plans.{name}.{key}")

    for name, add_on in iter_entries(mapping_section(migrated, "addOns", SOURCE_VERSION), "addOns", SOURCE_VERSION):
        for key in ADD_ON_VALUE_SECTIONS:
            _wrap_values(add_on, key, f"addOns.{name}.{key}")

    migrated["version"] = TARGET_VERSION
    return migrated


def _combine_creation_date(document: Dict[str, Any]) -> Dict[str, Any]:
    """Replace ``day``/``month``/``year`` with ``createdAt`` at the position of ``day``."""
    if "createdAt" in document:
        return {key: value for key, value in document.items() if key not in DATE_PARTS}

    parts = {}
    for part in DATE_PARTS:
        value = document.get(part)
        if isinstance(value, bool) or not isinstance(value, int):
            raise MigrationError(SOURCE_VERSION, f"'{part}' must be an integer, got {value!r}")
        parts[part] = value

    try:
        created_at = date(parts["year"], parts["month"], parts["day"])
    except ValueError as exc:
        raise MigrationError(SOURCE_VERSION, f"day, month and year do not form a valid date: {exc}") from exc

    combined = {}
    for key, value in document.items():
        if key == "day":
            combined["createdAt"] = created_at.isoformat()
        elif key not in DATE_PARTS:
            combined[key] = value
    return combined


def _wrap_values(owner: Dict[str, Any], key: str, path: str) -> None:
    section = owner.get(key)
    if section is None:
        return
    if not isinstance(section, dict):
        raise MigrationError(SOURCE_VERSION, f"'{path}' must be a mapping, got {type(section).__name__}")
    owner[key] = {
        name: value if isinstance(value, dict) else {"value": value}
        for name, value in section.items()
    }
