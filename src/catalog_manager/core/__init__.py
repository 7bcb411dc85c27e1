"""Core resource-management pipeline: identity, pagination, field model, merge and errors."""

from catalog_manager.core.errors import CatalogError, ErrorKind, translate, translated

__all__ = [
    "CatalogError",
    "ErrorKind",
    "translate",
    "translated",
]
