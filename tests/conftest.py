"""Root test configuration."""

import logging

import pytest
import structlog
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from catalog_manager.api.deps import session_dependency
from catalog_manager.api.main import create_app
from catalog_manager.config import Settings, get_settings
from catalog_manager.db.models import Base
from catalog_manager.db.repositories import CatalogItemRepository, ServiceTypeRepository
from catalog_manager.domain.models import ServiceType
from catalog_manager.services import build_service


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def settings():
    return Settings(database_url="sqlite+aiosqlite:///:memory:", seed_on_startup=False)


@pytest.fixture
def service(session, settings):
    return build_service(session, settings)


async def ensure_service_type(session, record_id: str, service_type: str) -> None:
    await ServiceTypeRepository(session).create(
        ServiceType(
            id=record_id,
            service_type=service_type,
            spec={"x": 1},
            path=f"service-types/{record_id}",
        )
    )


@pytest.fixture
async def service_types(session):
    """Register the vm and container service types catalog items refer to."""
    await ensure_service_type(session, "vm-st", "vm")
    await ensure_service_type(session, "container-st", "container")


@pytest.fixture
def catalog_items_repo(session):
    return CatalogItemRepository(session)


@pytest.fixture
def app(session, settings):
    application = create_app()

    async def override_session():
        yield session

    application.dependency_overrides[session_dependency] = override_session
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
