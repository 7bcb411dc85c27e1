"""Catalog item API routes."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from catalog_manager.api.deps import service_dependency
from catalog_manager.core.errors import immutable_field_update
from catalog_manager.core.merge import CatalogItemPatch
from catalog_manager.domain import v1alpha1
from catalog_manager.domain.models import API_VERSION
from catalog_manager.services import CreateCatalogItemRequest, Service

router = APIRouter()


# -- Request Models --


class CatalogItemSpecBody(BaseModel):
    service_type: str = Field(min_length=1)
    fields: list[v1alpha1.FieldConfiguration] = Field(min_length=1)


class CreateCatalogItemBody(BaseModel):
    api_version: Literal["v1alpha1"]
    display_name: str = Field(min_length=1, max_length=63)
    spec: CatalogItemSpecBody


class UpdateCatalogItemBody(BaseModel):
    api_version: str | None = None
    display_name: str | None = Field(default=None, min_length=1, max_length=63)
    spec: v1alpha1.CatalogItemSpec | None = None


# -- Endpoints --


@router.get(
    "/catalog-items",
    response_model=v1alpha1.CatalogItemList,
    response_model_exclude_none=True,
)
async def list_catalog_items(
    max_page_size: int | None = Query(default=None),
    page_token: str | None = Query(default=None),
    service_type: str | None = Query(default=None),
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.CatalogItemList:
    result = await service.catalog_items.list(
        page_token=page_token,
        max_page_size=max_page_size,
        service_type=service_type,
    )
    return v1alpha1.CatalogItemList(
        results=result.catalog_items,
        next_page_token=result.next_page_token,
    )


@router.post(
    "/catalog-items",
    status_code=status.HTTP_201_CREATED,
    response_model=v1alpha1.CatalogItem,
    response_model_exclude_none=True,
)
async def create_catalog_item(
    body: CreateCatalogItemBody,
    id_: str | None = Query(default=None, alias="id"),
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.CatalogItem:
    request = CreateCatalogItemRequest(
        id=id_,
        api_version=body.api_version,
        display_name=body.display_name,
        spec=v1alpha1.CatalogItemSpec(
            service_type=body.spec.service_type,
            fields=body.spec.fields,
        ),
    )
    return await service.catalog_items.create(request)


@router.get(
    "/catalog-items/{catalog_item_id}",
    response_model=v1alpha1.CatalogItem,
    response_model_exclude_none=True,
)
async def get_catalog_item(
    catalog_item_id: str,
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.CatalogItem:
    return await service.catalog_items.get(catalog_item_id)


@router.patch(
    "/catalog-items/{catalog_item_id}",
    response_model=v1alpha1.CatalogItem,
    response_model_exclude_none=True,
)
async def update_catalog_item(
    catalog_item_id: str,
    body: UpdateCatalogItemBody,
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.CatalogItem:
    if body.api_version is not None and body.api_version != API_VERSION:
        raise immutable_field_update()

    patch = CatalogItemPatch(display_name=body.display_name, spec=body.spec)
    return await service.catalog_items.update(catalog_item_id, patch)


@router.delete(
    "/catalog-items/{catalog_item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_catalog_item(
    catalog_item_id: str,
    service: Service = Depends(service_dependency),  # noqa: B008
) -> Response:
    await service.catalog_items.delete(catalog_item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
