"""External v1alpha1 resource shapes.

``None`` means the attribute is omitted; responses are rendered with
``exclude_none`` so omitted attributes never appear in JSON.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, JsonValue


class DependsOn(BaseModel):
    path: str
    mapping: dict[str, JsonValue]


class FieldConfiguration(BaseModel):
    path: str
    default: JsonValue = None
    display_name: str | None = None
    editable: bool | None = None
    validation_schema: dict[str, JsonValue] | None = None
    depends_on: DependsOn | None = None


class CatalogItemSpec(BaseModel):
    service_type: str | None = None
    fields: list[FieldConfiguration] | None = None


class CatalogItem(BaseModel):
    id: str | None = None
    api_version: str | None = None
    display_name: str | None = None
    path: str | None = None
    spec: CatalogItemSpec | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None


class CatalogItemList(BaseModel):
    results: list[CatalogItem]
    next_page_token: str | None = None


class ServiceTypeMetadata(BaseModel):
    labels: dict[str, str] | None = None


class ServiceType(BaseModel):
    id: str | None = None
    api_version: str | None = None
    service_type: str | None = None
    metadata: ServiceTypeMetadata | None = None
    spec: dict[str, JsonValue] | None = None
    path: str | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None


class ServiceTypeList(BaseModel):
    results: list[ServiceType]
    next_page_token: str | None = None
