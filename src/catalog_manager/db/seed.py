"""
Default data seeded at startup.

Ensures the demo ``three_tier_app_demo`` service type exists and, when the
catalog is empty, adds the "Pet Clinic" catalog item. Writes go straight to
the repositories, so the extension service type is accepted even though
callers cannot create it through the API.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_manager.db.errors import RecordNotFound
from catalog_manager.db.repositories import CatalogItemRepository, ServiceTypeRepository
from catalog_manager.domain.models import (
    CATALOG_ITEMS_PREFIX,
    SERVICE_TYPES_PREFIX,
    CatalogItem,
    CatalogItemSpec,
    DependsOn,
    FieldConfiguration,
    ServiceType,
)

logger = structlog.get_logger()

DEMO_SERVICE_TYPE = "three_tier_app_demo"


def default_service_types() -> list[ServiceType]:
    return [
        ServiceType(
            id=DEMO_SERVICE_TYPE,
            service_type=DEMO_SERVICE_TYPE,
            spec={},
            path=f"{SERVICE_TYPES_PREFIX}/{DEMO_SERVICE_TYPE}",
        )
    ]


def default_catalog_items() -> list[CatalogItem]:
    fields = [
        FieldConfiguration(
            path="database.engine",
            default="postgres",
            display_name="Database engine",
            editable=True,
            validation_schema={"type": "string", "enum": ["mysql", "postgres"]},
        ),
        FieldConfiguration(
            path="database.version",
            default="18",
            display_name="Database version",
            editable=True,
            depends_on=DependsOn(
                path="database.engine",
                mapping={
                    "postgres": ["16", "17", "18"],
                    "mysql": ["8.0", "8.4"],
                },
            ),
        ),
        FieldConfiguration(
            path="database.image",
            display_name="Database image",
            depends_on=DependsOn(
                path="database.version",
                mapping={
                    "16": "postgres:16",
                    "17": "postgres:17",
                    "18": "postgres:18",
                    "8.0": "mysql:8.0",
                    "8.4": "mysql:8.4",
                },
            ),
        ),
        FieldConfiguration(
            path="app.image",
            default="docker.io/springcommunity/spring-framework-petclinic:6.1.2",
            display_name="App image",
        ),
        FieldConfiguration(
            path="web.image",
            default="docker.io/library/nginx:alpine",
            display_name="Web image",
        ),
    ]
    return [
        CatalogItem(
            id="pet-clinic",
            display_name="Pet Clinic",
            path=f"{CATALOG_ITEMS_PREFIX}/pet-clinic",
            spec=CatalogItemSpec(service_type=DEMO_SERVICE_TYPE, fields=fields),
        )
    ]


async def seed_service_types(repository: ServiceTypeRepository) -> int:
    created = 0
    for record in default_service_types():
        try:
            await repository.get(record.id)
        except RecordNotFound:
            await repository.create(record)
            created += 1
            logger.info("service_type_seeded", service_type=record.service_type)
    return created


async def seed_catalog_items(repository: CatalogItemRepository) -> int:
    if await repository.count() > 0:
        return 0

    items = default_catalog_items()
    for item in items:
        await repository.create(item)
    logger.info("catalog_items_seeded", count=len(items))
    return len(items)


async def seed_defaults(session: AsyncSession) -> None:
    """Idempotently seed the demo service type and catalog item."""
    await seed_service_types(ServiceTypeRepository(session))
    await seed_catalog_items(CatalogItemRepository(session))
