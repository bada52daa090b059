"""
The version registry: each known version tag mapped to the updater that
moves a document to the next version, or to ``Terminal`` for the latest one.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Tuple, Union

from ..version_manager import LATEST_PRICING2YAML_VERSION
from .v10_to_v11 import v10_to_v11
from .v11_to_v20 import v11_to_v20

UpdaterFunction = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class Terminal:
    """Marks the latest version: there is nothing left to update."""


@dataclass(frozen=True)
class Transform:
    """Reshapes a document into the shape of ``target``."""
    function: UpdaterFunction
    target: str

    @property
    def name(self) -> str:
        return getattr(self.function, "__name__", repr(self.function))


Updater = Union[Terminal, Transform]


class VersionRegistry:
    """Read-only, ordered table of version tags and their updaters."""

    def __init__(self, entries: Iterable[Tuple[str, Updater]]):
        entries = tuple(entries)
        table = dict(entries)
        if len(table) != len(entries):
            raise ValueError("Version registry declares the same version twice")

        terminals = [version for version, updater in entries if isinstance(updater, Terminal)]
        if len(terminals) != 1:
            raise ValueError(f"Version registry needs exactly one terminal version, found {len(terminals)}")

        for version, updater in entries:
            if isinstance(updater, Transform) and updater.target not in table:
                raise ValueError(f"Updater for {version} targets unknown version {updater.target}")

        self._table = MappingProxyType(table)
        self._latest = terminals[0]

    @property
    def latest(self) -> str:
        return self._latest

    @property
    def versions(self) -> Tuple[str, ...]:
        return tuple(self._table)

    def __getitem__(self, version: str) -> Updater:
        return self._table[version]

    def __contains__(self, version: object) -> bool:
        return version in self._table

    def __len__(self) -> int:
        return len(self._table)


DEFAULT_REGISTRY = VersionRegistry([
    ("1.0", Transform(v10_to_v11, target="1.1")),
    ("1.1", Transform(v11_to_v20, target=LATEST_PRICING2YAML_VERSION)),
    (LATEST_PRICING2YAML_VERSION, Terminal()),
])
