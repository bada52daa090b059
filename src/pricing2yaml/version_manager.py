"""
Version detection for Pricing2Yaml documents.
"""
from typing import Any, Iterable

from .errors import MissingVersionError, UnsupportedVersionError

LATEST_PRICING2YAML_VERSION = "2.0"


def normalize_version(value: Any) -> Any:
    """Turn a YAML-parsed numeric tag (``2.0`` or ``2``) into its string form."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return f"{value}.0"
    if isinstance(value, float):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def detect_version(document: Any, known_versions: Iterable[str]) -> str:
    """Return the version tag of ``document``.

    Raises MissingVersionError when the root carries no ``version`` and
    UnsupportedVersionError when it is not one of ``known_versions``.
    """
    if not isinstance(document, dict) or document.get("version") is None:
        raise MissingVersionError()

    known = tuple(known_versions)
    version = normalize_version(document["version"])
    if not isinstance(version, str) or version not in known:
        raise UnsupportedVersionError(document["version"], known)
    return version
