"""Failures raised by the repositories.

These never leave the service layer: ``catalog_manager.core.errors.translate``
converts them into ``CatalogError`` values.
"""

from __future__ import annotations


class StoreError(RuntimeError):
    """Base class for repository failures."""

    def __init__(self, collection: str, key: str) -> None:
        super().__init__(f"{collection}: {key}")
        self.collection = collection
        self.key = key


class RecordNotFound(StoreError):
    """No record with the given id exists in the collection."""


class RecordIDTaken(StoreError):
    """A record with the given id already exists in the collection."""


class ServiceTypeNameTaken(StoreError):
    """A service type with the given service_type token already exists."""


class ServiceTypeReferenceNotFound(StoreError):
    """A catalog item references a service_type token that does not exist."""


class RecordHasInstances(StoreError):
    """The record still has dependents and cannot be deleted."""
