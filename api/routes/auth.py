from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models import User
from shared.profiles import ensure_profile, upsert_profile
from shared.security import (
    create_session_token,
    get_user_by_email,
    hash_password,
    verify_password,
)

from ..dependencies import get_current_user, get_db
from ..schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: RegisterRequest, session: AsyncSession = Depends(get_db)
) -> UserResponse:
    if await get_user_by_email(session, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    user = User(id=uuid.uuid4(), email=payload.email, password_hash=hash_password(payload.password))
    session.add(user)
    await session.commit()
    await session.refresh(user)

    await ensure_profile(session, user, new_signup=True)
    if payload.full_name:
        await upsert_profile(session, user.id, full_name=payload.full_name)
    return UserResponse(id=str(user.id), email=user.email)


@router.post("/login", response_model=LoginResponse)
async def login_user(payload: LoginRequest, session: AsyncSession = Depends(get_db)) -> LoginResponse:
    user = await get_user_by_email(session, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    # Accounts created before profiles existed get a minimal row on first sign-in.
    await ensure_profile(session, user)
    token = await create_session_token(session, user)
    return LoginResponse(access_token=token.token)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(id=str(current_user.id), email=current_user.email)
