"""
Domain error taxonomy for the catalog manager.

Every failure that leaves a service call is a ``CatalogError`` carrying one
``ErrorKind``. Repository failures are matched by exception class and
translated deterministically; anything unrecognised becomes ``INTERNAL``
with a generic detail so storage-engine messages never reach callers.

Kinds:
- NOT_FOUND: no record with the given id
- ID_TAKEN: id already exists in the collection
- NAME_TAKEN: service_type token already exists (service types only)
- SERVICE_TYPE_NOT_FOUND: referenced service_type token does not resolve
- HAS_INSTANCES: delete blocked by existing dependents
- IMMUTABLE_FIELD_UPDATE: attempted change of api_version or spec.service_type
- INVALID_ARGUMENT: malformed id, field path or page token
- INTERNAL: anything else
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum

import structlog

from catalog_manager.db.errors import (
    RecordHasInstances,
    RecordIDTaken,
    RecordNotFound,
    ServiceTypeNameTaken,
    ServiceTypeReferenceNotFound,
    StoreError,
)

logger = structlog.get_logger()

INTERNAL_DETAIL = "an internal error occurred"


class ErrorKind(StrEnum):
    """Closed set of domain error kinds."""

    NOT_FOUND = "not_found"
    ID_TAKEN = "id_taken"
    NAME_TAKEN = "name_taken"
    SERVICE_TYPE_NOT_FOUND = "service_type_not_found"
    HAS_INSTANCES = "has_instances"
    IMMUTABLE_FIELD_UPDATE = "immutable_field_update"
    INVALID_ARGUMENT = "invalid_argument"
    INTERNAL = "internal"


class CatalogError(Exception):
    """A domain failure with a kind and an optional human-readable detail."""

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        return f"CatalogError({self.kind.value!r}, {self.detail!r})"


def invalid_argument(detail: str) -> CatalogError:
    return CatalogError(ErrorKind.INVALID_ARGUMENT, detail)


def immutable_field_update() -> CatalogError:
    return CatalogError(
        ErrorKind.IMMUTABLE_FIELD_UPDATE,
        "cannot update immutable fields: api_version and spec.service_type are immutable",
    )


def translate(err: BaseException, resource: str) -> CatalogError:
    """Map any failure onto exactly one domain error.

    ``resource`` is the human name of the collection ("catalog item",
    "service type") used to build the detail text.
    """
    if isinstance(err, CatalogError):
        return err

    if isinstance(err, RecordNotFound):
        return CatalogError(ErrorKind.NOT_FOUND, f"{resource} not found")
    if isinstance(err, RecordIDTaken):
        return CatalogError(ErrorKind.ID_TAKEN, f"{resource} ID already exists")
    if isinstance(err, ServiceTypeNameTaken):
        return CatalogError(ErrorKind.NAME_TAKEN, "service type name already taken")
    if isinstance(err, ServiceTypeReferenceNotFound):
        return CatalogError(ErrorKind.SERVICE_TYPE_NOT_FOUND, "service type not found")
    if isinstance(err, RecordHasInstances):
        return CatalogError(ErrorKind.HAS_INSTANCES, f"{resource} has existing instances")
    if isinstance(err, StoreError):
        logger.warning("unmapped_store_error", resource=resource, error_type=type(err).__name__)

    logger.error("internal_error", resource=resource, exc_info=err)
    return CatalogError(ErrorKind.INTERNAL, INTERNAL_DETAIL)


@contextmanager
def translated(resource: str) -> Iterator[None]:
    """Re-raise every failure inside the block as a ``CatalogError``."""
    try:
        yield
    except Exception as exc:
        error = translate(exc, resource)
        if error is exc:
            raise
        raise error from exc
