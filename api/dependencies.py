from __future__ import annotations

from functools import lru_cache
from typing import AsyncIterator
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gen.brand_style import BrandStyleAnalyzer
from gen.composer import CreativeDirectorConfig, PromptComposer
from shared.config import get_settings
from shared.db import AsyncSessionFactory
from shared.events import ProfileEventBroker, broker
from shared.models import User
from shared.security import get_user_by_token
from shared.storage import LogoStorage, get_storage

http_bearer = HTTPBearer(auto_error=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionFactory() as session:
        yield session


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    session: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing credentials")
    user = await get_user_by_token(session, credentials.credentials)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


def require_owner(user_id: UUID, current_user: User = Depends(get_current_user)) -> User:
    """Only let users touch their own profile; others see a 404."""

    if current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return current_user


@lru_cache()
def get_composer() -> PromptComposer:
    return PromptComposer(CreativeDirectorConfig.from_settings(get_settings()))


@lru_cache()
def get_brand_style_analyzer() -> BrandStyleAnalyzer:
    return BrandStyleAnalyzer.from_settings(get_settings())


def get_logo_storage() -> LogoStorage:
    return get_storage()


def get_event_broker() -> ProfileEventBroker:
    return broker
