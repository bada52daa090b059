"""
Version updaters for Pricing2Yaml documents.
"""
from .chain import UpdaterChain
from .registry import DEFAULT_REGISTRY, Terminal, Transform, Updater, VersionRegistry
from .v10_to_v11 import v10_to_v11
from .v11_to_v20 import v11_to_v20

__all__ = [
    "DEFAULT_REGISTRY",
    "Terminal",
    "Transform",
    "Updater",
    "UpdaterChain",
    "VersionRegistry",
    "v10_to_v11",
    "v11_to_v20",
]
