"""
Sequential application of the registered updaters.
"""
import copy
from typing import Any, Dict

from ..errors import MigrationError, PricingError
from ..logging import get_logger
from ..version_manager import detect_version
from .registry import DEFAULT_REGISTRY, Terminal, Transform, VersionRegistry

logger = get_logger(__name__)

INTERPRETATION_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


class UpdaterChain:
    """Moves an untyped document to the latest version of ``registry``."""

    def __init__(self, registry: VersionRegistry = DEFAULT_REGISTRY):
        self._registry = registry

    @property
    def registry(self) -> VersionRegistry:
        return self._registry

    def update(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Return a migrated copy of ``document``; the input is left untouched.

        At most one step per known version is taken, so a registry whose
        updaters never reach the terminal version fails instead of looping.
        """
        version = detect_version(document, self._registry.versions)
        current = copy.deepcopy(document)

        for _ in range(len(self._registry)):
            updater = self._registry[version]
            if isinstance(updater, Terminal):
                return current
            current = self._apply(updater, version, current)
            version = self._detect_target(current, version, updater)

        raise MigrationError(
            version,
            f"version {self._registry.latest} not reached after {len(self._registry)} updates",
        )

    def _apply(self, updater: Transform, version: str, document: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("pricing.migration.step", source=version, target=updater.target, updater=updater.name)
        try:
            return updater.function(document)
        except MigrationError:
            raise
        except INTERPRETATION_ERRORS as exc:
            raise MigrationError(version, f"{updater.name} could not interpret the document: {exc}") from exc

    def _detect_target(self, document: Dict[str, Any], source: str, updater: Transform) -> str:
        try:
            version = detect_version(document, self._registry.versions)
        except PricingError as exc:
            raise MigrationError(source, f"{updater.name} produced an invalid version: {exc}") from exc
        if version != updater.target:
            raise MigrationError(
                source, f"{updater.name} produced version {version} instead of {updater.target}"
            )
        return version
