"""Service type API routes."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field, JsonValue

from catalog_manager.api.deps import service_dependency
from catalog_manager.domain import v1alpha1
from catalog_manager.services import CreateServiceTypeRequest, Service

router = APIRouter()


class CreateServiceTypeBody(BaseModel):
    api_version: Literal["v1alpha1"]
    service_type: str = Field(min_length=1)
    spec: dict[str, JsonValue]
    metadata: v1alpha1.ServiceTypeMetadata | None = None


@router.get(
    "/service-types",
    response_model=v1alpha1.ServiceTypeList,
    response_model_exclude_none=True,
)
async def list_service_types(
    max_page_size: int | None = Query(default=None),
    page_token: str | None = Query(default=None),
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.ServiceTypeList:
    result = await service.service_types.list(
        page_token=page_token, max_page_size=max_page_size
    )
    return v1alpha1.ServiceTypeList(
        results=result.service_types,
        next_page_token=result.next_page_token,
    )


@router.post(
    "/service-types",
    status_code=status.HTTP_201_CREATED,
    response_model=v1alpha1.ServiceType,
    response_model_exclude_none=True,
)
async def create_service_type(
    body: CreateServiceTypeBody,
    id_: str | None = Query(default=None, alias="id"),
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.ServiceType:
    request = CreateServiceTypeRequest(
        id=id_,
        api_version=body.api_version,
        service_type=body.service_type,
        spec=body.spec,
        labels=body.metadata.labels if body.metadata else None,
    )
    return await service.service_types.create(request)


@router.get(
    "/service-types/{service_type_id}",
    response_model=v1alpha1.ServiceType,
    response_model_exclude_none=True,
)
async def get_service_type(
    service_type_id: str,
    service: Service = Depends(service_dependency),  # noqa: B008
) -> v1alpha1.ServiceType:
    return await service.service_types.get(service_type_id)


@router.delete(
    "/service-types/{service_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_service_type(
    service_type_id: str,
    service: Service = Depends(service_dependency),  # noqa: B008
) -> Response:
    await service.service_types.delete(service_type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
