"""Resource services wired to their repositories."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from catalog_manager.config import Settings, get_settings
from catalog_manager.db.repositories import CatalogItemRepository, ServiceTypeRepository
from catalog_manager.services.catalog_items import (
    CatalogItemListResult,
    CatalogItemService,
    CreateCatalogItemRequest,
)
from catalog_manager.services.service_types import (
    CreateServiceTypeRequest,
    ServiceTypeListResult,
    ServiceTypeService,
)


@dataclass(slots=True)
class Service:
    """Aggregate of the per-resource services sharing one session."""

    service_types: ServiceTypeService
    catalog_items: CatalogItemService


def build_service(session: AsyncSession, settings: Settings | None = None) -> Service:
    cfg = settings or get_settings()
    return Service(
        service_types=ServiceTypeService(
            ServiceTypeRepository(session),
            allowed_service_types=cfg.allowed_service_types,
            default_page_size=cfg.default_page_size,
            max_page_size=cfg.max_page_size,
        ),
        catalog_items=CatalogItemService(
            CatalogItemRepository(session),
            default_page_size=cfg.default_page_size,
            max_page_size=cfg.max_page_size,
        ),
    )


__all__ = [
    "Service",
    "build_service",
    "CatalogItemService",
    "CatalogItemListResult",
    "CreateCatalogItemRequest",
    "ServiceTypeService",
    "ServiceTypeListResult",
    "CreateServiceTypeRequest",
]
