from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator[datetime]):
    """Timestamp stored in UTC and always read back timezone-aware.

    SQLite has no zone-aware storage and returns naive values; those are UTC
    by construction and get ``timezone.utc`` attached on load.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return _as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return _as_utc(value)


class Base(DeclarativeBase):
    pass


class ServiceTypeModel(Base):
    """Provisionable workload category."""

    __tablename__ = "service_types"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    api_version: Mapped[str] = mapped_column(String(50), nullable=False)
    service_type: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    spec: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    labels: Mapped[dict[str, str] | None] = mapped_column(JSON)
    path: Mapped[str] = mapped_column(String(512), nullable=False)
    create_time: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False
    )
    update_time: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False
    )

    __table_args__ = (Index("idx_service_types_order", "create_time", "id"),)


class CatalogItemModel(Base):
    """User-facing offering instantiating a service type."""

    __tablename__ = "catalog_items"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    api_version: Mapped[str] = mapped_column(String(50), nullable=False)
    display_name: Mapped[str] = mapped_column(String(63), nullable=False)
    path: Mapped[str] = mapped_column(String(512), nullable=False)
    spec_service_type: Mapped[str] = mapped_column(
        String(255), ForeignKey("service_types.service_type"), nullable=False, index=True
    )
    spec: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    create_time: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False
    )
    update_time: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False
    )

    __table_args__ = (Index("idx_catalog_items_order", "create_time", "id"),)


class CatalogItemInstanceModel(Base):
    """Instance provisioned from a catalog item; owned by the provisioning side."""

    __tablename__ = "catalog_item_instances"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    catalog_item_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("catalog_items.id"), nullable=False, index=True
    )
    display_name: Mapped[str | None] = mapped_column(String(63))
    create_time: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False
    )
