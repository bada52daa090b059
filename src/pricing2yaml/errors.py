"""
Error kinds raised by the Pricing2Yaml parsing pipeline.
"""
from typing import Iterable, Optional


class PricingError(Exception):
    """Base class for every failure of the parsing pipeline."""


class MissingVersionError(PricingError):
    """Raised when the document root has no ``version`` field."""

    def __init__(self, message: str = "The pricing document must declare a 'version' field at its root"):
        super().__init__(message)


class UnsupportedVersionError(PricingError):
    """Raised when the ``version`` field is not a known version tag."""

    def __init__(self, version, supported: Iterable[str]):
        self.version = version
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported pricing version {version!r}. Supported versions: {', '.join(self.supported)}"
        )


class MigrationError(PricingError):
    """Raised when an updater cannot reshape its input or the chain misbehaves."""

    def __init__(self, source_version: Optional[str], detail: str):
        self.source_version = source_version
        self.detail = detail
        super().__init__(f"Failed to update pricing from version {source_version}: {detail}")


class SchemaError(PricingError):
    """Raised when a required field is missing or has the wrong kind."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


class ValidationError(PricingError):
    """Raised when a cross-entity invariant of the pricing is violated."""

    def __init__(self, message: str, entity: Optional[str] = None):
        self.entity = entity
        super().__init__(message)
