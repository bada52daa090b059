"""
Entry points of the parsing pipeline: load, detect, update, map, validate.
"""
import os
from typing import Any, Optional, Union

import yaml
from yaml.constructor import ConstructorError

from .config import get_settings
from .errors import PricingError
from .logging import get_logger
from .models.pricing import Pricing
from .transformers.pricing_mapper import PricingMapper
from .updaters import DEFAULT_REGISTRY, UpdaterChain, VersionRegistry
from .validators.pricing_validator import PricingValidator

logger = get_logger(__name__)

MERGE_TAG = "tag:yaml.org,2002:merge"


class UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that refuses mappings with a repeated key."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            if not isinstance(key_node, yaml.ScalarNode) or key_node.tag == MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found duplicate key {key!r}", key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def load_document(yaml_str: str) -> Any:
    """Deserialize a YAML string into nested dicts, lists and scalars."""
    return yaml.load(yaml_str, Loader=UniqueKeyLoader)


def retrieve_pricing_from_yaml(yaml_str: str, registry: Optional[VersionRegistry] = None) -> Pricing:
    """Parse, update to the latest version and validate a Pricing2Yaml document."""
    if registry is None:
        registry = DEFAULT_REGISTRY
    document = load_document(yaml_str)
    try:
        migrated = UpdaterChain(registry).update(document)
        pricing = PricingMapper(registry.latest).map(migrated)
        PricingValidator().validate(pricing)
    except PricingError as exc:
        logger.warning("pricing.parse.failed", kind=type(exc).__name__, error=str(exc))
        raise

    logger.info(
        "pricing.parse.completed",
        saas_name=pricing.saas_name,
        source_version=document.get("version"),
        plans=len(pricing.plans),
        add_ons=len(pricing.add_ons),
    )
    return pricing


def retrieve_pricing_from_path(path: Union[str, os.PathLike], registry: Optional[VersionRegistry] = None) -> Pricing:
    """Read the file at ``path`` and parse it with :func:`retrieve_pricing_from_yaml`."""
    absolute_path = os.path.abspath(path)
    logger.debug("pricing.parse.read", path=absolute_path)
    with open(absolute_path, "r", encoding=get_settings().file_encoding) as file_handle:
        content = file_handle.read()
    return retrieve_pricing_from_yaml(content, registry=registry)
