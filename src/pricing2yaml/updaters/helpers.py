"""
Shape helpers shared by the version updaters.
"""
from typing import Any, Dict, Iterator, Tuple

from ..errors import MigrationError


def mapping_section(document: Dict[str, Any], key: str, source_version: str) -> Dict[str, Any]:
    """Return ``document[key]`` as a mapping; absent or null sections read as empty."""
    section = document.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise MigrationError(source_version, f"'{key}' must be a mapping, got {type(section).__name__}")
    return section


def iter_entries(section: Dict[str, Any], path: str, source_version: str) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Yield ``(name, body)`` for every non-null entry of a name-keyed section."""
    for name, body in section.items():
        if body is None:
            continue
        if not isinstance(body, dict):
            raise MigrationError(
                source_version, f"'{path}.{name}' must be a mapping, got {type(body).__name__}"
            )
        yield name, body


def rename_key(mapping: Dict[str, Any], old: str, new: str, path: str, source_version: str) -> Dict[str, Any]:
    """Return a copy of ``mapping`` with ``old`` renamed to ``new``, keeping the key order."""
    if old not in mapping:
        return dict(mapping)
    if new in mapping:
        raise MigrationError(source_version, f"'{path}' declares both '{old}' and '{new}'")
    return {(new if key == old else key): value for key, value in mapping.items()}
