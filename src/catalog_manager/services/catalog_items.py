"""Catalog item operations: list, create, get, update and delete."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from catalog_manager.core import fields as field_model
from catalog_manager.core import pagination
from catalog_manager.core.errors import invalid_argument, translated
from catalog_manager.core.identity import assign_id, resource_path
from catalog_manager.core.merge import CatalogItemPatch, merge_catalog_item
from catalog_manager.db.repositories import CatalogItemStore
from catalog_manager.domain import models, v1alpha1

logger = structlog.get_logger()

RESOURCE = "catalog item"


@dataclass(slots=True)
class CreateCatalogItemRequest:
    display_name: str
    spec: v1alpha1.CatalogItemSpec
    id: str | None = None
    api_version: str = models.API_VERSION


@dataclass(slots=True)
class CatalogItemListResult:
    catalog_items: list[v1alpha1.CatalogItem]
    next_page_token: str | None = None


def to_api(item: models.CatalogItem) -> v1alpha1.CatalogItem:
    return v1alpha1.CatalogItem(
        id=item.id,
        api_version=item.api_version,
        display_name=item.display_name,
        path=item.path,
        spec=v1alpha1.CatalogItemSpec(
            service_type=item.spec.service_type,
            fields=field_model.fields_to_external(item.spec.fields),
        ),
        create_time=item.create_time,
        update_time=item.update_time,
    )


class CatalogItemService:
    """Business logic for catalog items on top of a ``CatalogItemStore``."""

    def __init__(
        self,
        store: CatalogItemStore,
        *,
        default_page_size: int = pagination.DEFAULT_PAGE_SIZE,
        max_page_size: int = pagination.MAX_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def list(
        self,
        *,
        page_token: str | None = None,
        max_page_size: int | None = None,
        service_type: str | None = None,
    ) -> CatalogItemListResult:
        position = pagination.decode(page_token)
        limit = pagination.clamp_page_size(
            max_page_size, default=self.default_page_size, maximum=self.max_page_size
        )

        with translated(RESOURCE):
            items, has_more = await self.store.list(position, limit, service_type=service_type)

        last = None
        if items:
            last = pagination.Position(create_time=items[-1].create_time, id=items[-1].id)
        return CatalogItemListResult(
            catalog_items=[to_api(item) for item in items],
            next_page_token=pagination.next_token(last, has_more),
        )

    async def create(self, request: CreateCatalogItemRequest) -> v1alpha1.CatalogItem:
        if not request.spec.service_type:
            raise invalid_argument("invalid spec: service_type is required")

        record_id = assign_id(request.id)
        record = models.CatalogItem(
            id=record_id,
            api_version=request.api_version,
            display_name=request.display_name,
            path=resource_path(models.CATALOG_ITEMS_PREFIX, record_id),
            spec=models.CatalogItemSpec(
                service_type=request.spec.service_type,
                fields=field_model.fields_to_internal(request.spec.fields),
            ),
        )

        with translated(RESOURCE):
            created = await self.store.create(record)

        logger.info(
            "catalog_item_created",
            catalog_item_id=created.id,
            service_type=created.spec.service_type,
        )
        return to_api(created)

    async def get(self, record_id: str) -> v1alpha1.CatalogItem:
        with translated(RESOURCE):
            item = await self.store.get(record_id)
        return to_api(item)

    async def update(self, record_id: str, patch: CatalogItemPatch) -> v1alpha1.CatalogItem:
        """Read, merge, write, then read again for the stored update_time.

        The sequence is not one transaction: concurrent updates to the same
        item are last-writer-wins.
        """
        with translated(RESOURCE):
            existing = await self.store.get(record_id)

        merged = merge_catalog_item(existing, patch)

        with translated(RESOURCE):
            await self.store.update(merged)
            refreshed = await self.store.get(record_id)

        logger.info("catalog_item_updated", catalog_item_id=record_id)
        return to_api(refreshed)

    async def delete(self, record_id: str) -> None:
        with translated(RESOURCE):
            await self.store.delete(record_id)
        logger.info("catalog_item_deleted", catalog_item_id=record_id)
