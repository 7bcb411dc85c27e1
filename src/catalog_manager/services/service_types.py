"""Service type operations: list, create, get and delete."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import structlog

from catalog_manager.core import pagination
from catalog_manager.core.errors import invalid_argument, translated
from catalog_manager.core.identity import assign_id, resource_path
from catalog_manager.db.repositories import ServiceTypeStore
from catalog_manager.domain import models, v1alpha1

logger = structlog.get_logger()

RESOURCE = "service type"

DEFAULT_SERVICE_TYPES = ("vm", "container", "cluster", "db")


@dataclass(slots=True)
class CreateServiceTypeRequest:
    service_type: str
    spec: dict[str, Any] = field(default_factory=dict)
    id: str | None = None
    api_version: str = models.API_VERSION
    labels: dict[str, str] | None = None


@dataclass(slots=True)
class ServiceTypeListResult:
    service_types: list[v1alpha1.ServiceType]
    next_page_token: str | None = None


def to_api(record: models.ServiceType) -> v1alpha1.ServiceType:
    metadata = None
    if record.labels:
        metadata = v1alpha1.ServiceTypeMetadata(labels=dict(record.labels))
    return v1alpha1.ServiceType(
        id=record.id,
        api_version=record.api_version,
        service_type=record.service_type,
        metadata=metadata,
        spec=dict(record.spec),
        path=record.path,
        create_time=record.create_time,
        update_time=record.update_time,
    )


class ServiceTypeService:
    """Business logic for service types on top of a ``ServiceTypeStore``."""

    def __init__(
        self,
        store: ServiceTypeStore,
        *,
        allowed_service_types: Iterable[str] = DEFAULT_SERVICE_TYPES,
        default_page_size: int = pagination.DEFAULT_PAGE_SIZE,
        max_page_size: int = pagination.MAX_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.allowed_service_types = tuple(allowed_service_types)
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def list(
        self, *, page_token: str | None = None, max_page_size: int | None = None
    ) -> ServiceTypeListResult:
        position = pagination.decode(page_token)
        limit = pagination.clamp_page_size(
            max_page_size, default=self.default_page_size, maximum=self.max_page_size
        )

        with translated(RESOURCE):
            records, has_more = await self.store.list(position, limit)

        last = None
        if records:
            last = pagination.Position(create_time=records[-1].create_time, id=records[-1].id)
        return ServiceTypeListResult(
            service_types=[to_api(r) for r in records],
            next_page_token=pagination.next_token(last, has_more),
        )

    async def create(self, request: CreateServiceTypeRequest) -> v1alpha1.ServiceType:
        if request.service_type not in self.allowed_service_types:
            raise invalid_argument(
                "invalid service type: must be one of: " + ", ".join(self.allowed_service_types)
            )

        record_id = assign_id(request.id)
        record = models.ServiceType(
            id=record_id,
            api_version=request.api_version,
            service_type=request.service_type,
            spec=request.spec,
            labels=request.labels or {},
            path=resource_path(models.SERVICE_TYPES_PREFIX, record_id),
        )

        with translated(RESOURCE):
            created = await self.store.create(record)

        logger.info(
            "service_type_created",
            service_type_id=created.id,
            service_type=created.service_type,
        )
        return to_api(created)

    async def get(self, record_id: str) -> v1alpha1.ServiceType:
        with translated(RESOURCE):
            record = await self.store.get(record_id)
        return to_api(record)

    async def delete(self, record_id: str) -> None:
        with translated(RESOURCE):
            await self.store.delete(record_id)
        logger.info("service_type_deleted", service_type_id=record_id)
