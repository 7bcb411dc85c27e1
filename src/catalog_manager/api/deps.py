from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_manager.config import Settings, get_settings
from catalog_manager.db.session import get_session
from catalog_manager.services import Service, build_service


async def session_dependency() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def service_dependency(
    session: AsyncSession = Depends(session_dependency),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> Service:
    return build_service(session, settings)
