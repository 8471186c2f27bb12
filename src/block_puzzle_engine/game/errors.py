from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when the engine is built from an unusable configuration."""


class ShapeError(ConfigurationError):
    pass


class CatalogError(ConfigurationError):
    pass
