"""Password hashing and opaque bearer tokens."""
from __future__ import annotations

import uuid
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SessionToken, User

MIN_PASSWORD_LENGTH = 6

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


async def create_session_token(session: AsyncSession, user: User) -> SessionToken:
    token = SessionToken(id=uuid.uuid4(), user_id=user.id, token=str(uuid.uuid4()))
    session.add(token)
    await session.commit()
    await session.refresh(token)
    return token


async def get_user_by_token(session: AsyncSession, token: str) -> Optional[User]:
    result = await session.execute(
        select(User)
        .join(SessionToken, SessionToken.user_id == User.id)
        .where(SessionToken.token == token)
    )
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()
