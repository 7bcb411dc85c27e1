"""
Service type and catalog item repositories.

Each write method is one atomic unit: it commits on success and rolls the
session back when the database rejects the write. Uniqueness and
referential checks live here since only the database sees concurrent
writers. A losing concurrent insert surfaces as ``RecordIDTaken`` /
``ServiceTypeNameTaken`` through the unique constraints, and a delete that
races a new dependent surfaces as ``RecordHasInstances`` through the
foreign keys.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_manager.core.pagination import Cursor
from catalog_manager.db.errors import (
    RecordHasInstances,
    RecordIDTaken,
    RecordNotFound,
    ServiceTypeNameTaken,
    ServiceTypeReferenceNotFound,
)
from catalog_manager.db.models import (
    CatalogItemInstanceModel,
    CatalogItemModel,
    ServiceTypeModel,
    utcnow,
)
from catalog_manager.domain.models import CatalogItem, CatalogItemSpec, ServiceType

SERVICE_TYPES = "service_types"
CATALOG_ITEMS = "catalog_items"


class ServiceTypeStore(Protocol):
    async def list(
        self, position: Cursor, limit: int
    ) -> tuple[list[ServiceType], bool]: ...

    async def get(self, record_id: str) -> ServiceType: ...

    async def create(self, record: ServiceType) -> ServiceType: ...

    async def delete(self, record_id: str) -> None: ...


class CatalogItemStore(Protocol):
    async def list(
        self, position: Cursor, limit: int, service_type: str | None = None
    ) -> tuple[list[CatalogItem], bool]: ...

    async def get(self, record_id: str) -> CatalogItem: ...

    async def create(self, record: CatalogItem) -> CatalogItem: ...

    async def update(self, record: CatalogItem) -> None: ...

    async def delete(self, record_id: str) -> None: ...


def _after(model: type[ServiceTypeModel] | type[CatalogItemModel], position: Cursor):
    """Keyset predicate: strictly after ``position`` in (create_time, id) order."""
    assert position is not None
    return or_(
        model.create_time > position.create_time,
        and_(model.create_time == position.create_time, model.id > position.id),
    )


class ServiceTypeRepository:
    """Repository for service type database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list(self, position: Cursor, limit: int) -> tuple[list[ServiceType], bool]:
        """Return up to ``limit`` records after ``position`` and whether more remain."""
        stmt = select(ServiceTypeModel)
        if position is not None:
            stmt = stmt.where(_after(ServiceTypeModel, position))
        stmt = (
            stmt.order_by(ServiceTypeModel.create_time, ServiceTypeModel.id)
            .limit(limit + 1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        models = list(result.scalars().all())
        return [self._to_domain(m) for m in models[:limit]], len(models) > limit

    async def get(self, record_id: str) -> ServiceType:
        model = await self._load(record_id)
        if model is None:
            raise RecordNotFound(SERVICE_TYPES, record_id)
        return self._to_domain(model)

    async def exists_by_name(self, service_type: str) -> bool:
        result = await self.session.execute(
            select(ServiceTypeModel.id).where(ServiceTypeModel.service_type == service_type)
        )
        return result.first() is not None

    async def create(self, record: ServiceType) -> ServiceType:
        """Insert a service type; ids and service_type tokens are unique."""
        if await self._load(record.id) is not None:
            raise RecordIDTaken(SERVICE_TYPES, record.id)
        if await self.exists_by_name(record.service_type):
            raise ServiceTypeNameTaken(SERVICE_TYPES, record.service_type)

        now = utcnow()
        model = ServiceTypeModel(
            id=record.id,
            api_version=record.api_version,
            service_type=record.service_type,
            spec=dict(record.spec),
            labels=dict(record.labels) or None,
            path=record.path,
            create_time=now,
            update_time=now,
        )
        self.session.add(model)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if await self._load(record.id) is not None:
                raise RecordIDTaken(SERVICE_TYPES, record.id) from None
            if await self.exists_by_name(record.service_type):
                raise ServiceTypeNameTaken(SERVICE_TYPES, record.service_type) from None
            raise
        return self._to_domain(model)

    async def delete(self, record_id: str) -> None:
        """Delete a service type no catalog item refers to."""
        model = await self._load(record_id)
        if model is None:
            raise RecordNotFound(SERVICE_TYPES, record_id)

        service_type = model.service_type
        if await self._reference_count(service_type) > 0:
            raise RecordHasInstances(SERVICE_TYPES, record_id)

        await self.session.delete(model)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if await self._reference_count(service_type) > 0:
                raise RecordHasInstances(SERVICE_TYPES, record_id) from None
            raise

    async def _reference_count(self, service_type: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(CatalogItemModel)
            .where(CatalogItemModel.spec_service_type == service_type)
        )
        return result.scalar_one()

    async def _load(self, record_id: str) -> ServiceTypeModel | None:
        result = await self.session.execute(
            select(ServiceTypeModel)
            .where(ServiceTypeModel.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: ServiceTypeModel) -> ServiceType:
        return ServiceType(
            id=model.id,
            api_version=model.api_version,
            service_type=model.service_type,
            spec=model.spec or {},
            labels=model.labels or {},
            path=model.path,
            create_time=model.create_time,
            update_time=model.update_time,
        )


class CatalogItemRepository:
    """Repository for catalog item database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list(
        self, position: Cursor, limit: int, service_type: str | None = None
    ) -> tuple[list[CatalogItem], bool]:
        """Return up to ``limit`` records after ``position`` and whether more remain."""
        stmt = select(CatalogItemModel)
        if service_type is not None:
            stmt = stmt.where(CatalogItemModel.spec_service_type == service_type)
        if position is not None:
            stmt = stmt.where(_after(CatalogItemModel, position))
        stmt = (
            stmt.order_by(CatalogItemModel.create_time, CatalogItemModel.id)
            .limit(limit + 1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        models = list(result.scalars().all())
        return [self._to_domain(m) for m in models[:limit]], len(models) > limit

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(CatalogItemModel))
        return result.scalar_one()

    async def get(self, record_id: str) -> CatalogItem:
        model = await self._load(record_id)
        if model is None:
            raise RecordNotFound(CATALOG_ITEMS, record_id)
        return self._to_domain(model)

    async def create(self, record: CatalogItem) -> CatalogItem:
        """Insert a catalog item whose spec.service_type names an existing service type."""
        if await self._load(record.id) is not None:
            raise RecordIDTaken(CATALOG_ITEMS, record.id)
        if not await ServiceTypeRepository(self.session).exists_by_name(record.spec.service_type):
            raise ServiceTypeReferenceNotFound(CATALOG_ITEMS, record.spec.service_type)

        now = utcnow()
        model = CatalogItemModel(
            id=record.id,
            api_version=record.api_version,
            display_name=record.display_name,
            path=record.path,
            spec_service_type=record.spec.service_type,
            spec=record.spec.model_dump(mode="json"),
            create_time=now,
            update_time=now,
        )
        self.session.add(model)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if await self._load(record.id) is not None:
                raise RecordIDTaken(CATALOG_ITEMS, record.id) from None
            if not await ServiceTypeRepository(self.session).exists_by_name(
                record.spec.service_type
            ):
                raise ServiceTypeReferenceNotFound(
                    CATALOG_ITEMS, record.spec.service_type
                ) from None
            raise
        return self._to_domain(model)

    async def update(self, record: CatalogItem) -> None:
        """Persist display_name and spec.fields; other attributes are left as stored."""
        model = await self._load(record.id)
        if model is None:
            raise RecordNotFound(CATALOG_ITEMS, record.id)

        model.display_name = record.display_name
        model.spec = CatalogItemSpec(
            service_type=model.spec_service_type,
            fields=record.spec.fields,
        ).model_dump(mode="json")
        model.update_time = utcnow()
        await self.session.commit()

    async def delete(self, record_id: str) -> None:
        """Delete a catalog item that has no instances."""
        model = await self._load(record_id)
        if model is None:
            raise RecordNotFound(CATALOG_ITEMS, record_id)

        if await self._instance_count(record_id) > 0:
            raise RecordHasInstances(CATALOG_ITEMS, record_id)

        await self.session.delete(model)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if await self._instance_count(record_id) > 0:
                raise RecordHasInstances(CATALOG_ITEMS, record_id) from None
            raise

    async def _instance_count(self, record_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(CatalogItemInstanceModel)
            .where(CatalogItemInstanceModel.catalog_item_id == record_id)
        )
        return result.scalar_one()

    async def _load(self, record_id: str) -> CatalogItemModel | None:
        result = await self.session.execute(
            select(CatalogItemModel)
            .where(CatalogItemModel.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: CatalogItemModel) -> CatalogItem:
        return CatalogItem(
            id=model.id,
            api_version=model.api_version,
            display_name=model.display_name,
            path=model.path,
            spec=CatalogItemSpec.model_validate(model.spec),
            create_time=model.create_time,
            update_time=model.update_time,
        )
