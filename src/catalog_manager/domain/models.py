"""Internal records exchanged between the services and the repositories.

Optional attributes are held as their zero value here (``""``, ``False``,
``{}``); omission only exists on the external ``v1alpha1`` shapes.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, JsonValue

API_VERSION = "v1alpha1"

SERVICE_TYPES_PREFIX = "service-types"
CATALOG_ITEMS_PREFIX = "catalog-items"


class DependsOn(BaseModel):
    path: str
    # parent value -> derived value, or list of permitted values
    mapping: dict[str, JsonValue] = Field(default_factory=dict)


class FieldConfiguration(BaseModel):
    path: str
    default: JsonValue = None
    display_name: str = ""
    editable: bool = False
    validation_schema: dict[str, JsonValue] = Field(default_factory=dict)
    depends_on: DependsOn | None = None


class CatalogItemSpec(BaseModel):
    service_type: str
    fields: list[FieldConfiguration] = Field(default_factory=list)


class CatalogItem(BaseModel):
    id: str
    api_version: str = API_VERSION
    display_name: str
    path: str
    spec: CatalogItemSpec
    create_time: datetime | None = None
    update_time: datetime | None = None


class ServiceType(BaseModel):
    id: str
    api_version: str = API_VERSION
    service_type: str
    spec: dict[str, JsonValue] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)
    path: str
    create_time: datetime | None = None
    update_time: datetime | None = None
