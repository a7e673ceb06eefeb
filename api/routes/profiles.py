from __future__ import annotations

import json
import logging
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sse_starlette.sse import EventSourceResponse

from gen.brand_style import BrandStyleAnalyzer, BrandStyleError
from shared.events import ProfileEventBroker
from shared.models import Profile, User
from shared.profiles import (
    complete_onboarding,
    ensure_profile,
    get_profile,
    is_brand_ready,
    upsert_profile,
)
from shared.storage import LogoStorage, StorageError, UploadRejected

from ..dependencies import (
    get_brand_style_analyzer,
    get_current_user,
    get_db,
    get_event_broker,
    get_logo_storage,
    require_owner,
)
from ..schemas.profiles import (
    BrandStyleRequest,
    BrandStyleResponse,
    LogoUploadResponse,
    OnboardingRequest,
    ProfileResponse,
    ProfileUpsertRequest,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


async def _load_profile(session: AsyncSession, user_id: uuid.UUID) -> Profile:
    profile = await get_profile(session, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.post("", response_model=ProfileResponse)
async def upsert_own_profile(
    payload: ProfileUpsertRequest,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProfileResponse:
    profile = await upsert_profile(
        session, current_user.id, email=current_user.email, **payload.model_dump()
    )
    return ProfileResponse.model_validate(profile)


@router.get("/{user_id}", response_model=ProfileResponse)
async def read_profile(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_owner),
) -> ProfileResponse:
    return ProfileResponse.model_validate(await _load_profile(session, user_id))


@router.get("/{user_id}/readiness", response_model=ReadinessResponse)
async def read_readiness(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_owner),
) -> ReadinessResponse:
    ready = is_brand_ready(await get_profile(session, user_id))
    return ReadinessResponse(ready=ready, needs_onboarding=not ready)


@router.post("/{user_id}/logo", response_model=LogoUploadResponse)
async def upload_logo(
    user_id: uuid.UUID,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_db),
    storage: LogoStorage = Depends(get_logo_storage),
    _: User = Depends(require_owner),
) -> LogoUploadResponse:
    # Read one byte past the limit so oversized files are rejected without buffering them whole.
    payload = await file.read(storage.max_bytes + 1)
    previous = await get_profile(session, user_id)
    previous_url = previous.brand_logo_url if previous is not None else None
    try:
        stored = await run_in_threadpool(
            storage.upload_logo, user_id, file.filename, payload, file.content_type or ""
        )
    except UploadRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.reason) from exc
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Logo storage is unavailable"
        ) from exc
    await upsert_profile(session, user_id, brand_logo_url=stored.url)
    if previous_url and previous_url != stored.url:
        await run_in_threadpool(storage.delete_logo, previous_url)
    return LogoUploadResponse(
        brand_logo_url=stored.url, size=stored.size, content_type=stored.content_type
    )


@router.post("/{user_id}/brand-style", response_model=BrandStyleResponse)
async def suggest_brand_style(
    user_id: uuid.UUID,
    payload: BrandStyleRequest | None = None,
    session: AsyncSession = Depends(get_db),
    storage: LogoStorage = Depends(get_logo_storage),
    analyzer: BrandStyleAnalyzer = Depends(get_brand_style_analyzer),
    _: User = Depends(require_owner),
) -> BrandStyleResponse:
    """Describe the uploaded logo; the suggestion is returned for editing, not saved."""

    payload = payload or BrandStyleRequest()
    profile = await _load_profile(session, user_id)
    if not profile.brand_logo_url:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Upload a logo before requesting analysis"
        )
    try:
        logo, content_type = await run_in_threadpool(storage.read_logo, profile.brand_logo_url)
        description = await analyzer.analyze(
            logo,
            content_type,
            industry=payload.industry_type or profile.industry_type,
            brand_name=payload.brand_name or profile.brand_name,
        )
    except (StorageError, BrandStyleError) as exc:
        logger.warning("Brand style suggestion failed for %s: %s", user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Brand analysis is unavailable"
        ) from exc
    return BrandStyleResponse(brand_style_context=description)


@router.post("/{user_id}/onboarding", response_model=ProfileResponse)
async def save_onboarding(
    user_id: uuid.UUID,
    payload: OnboardingRequest,
    session: AsyncSession = Depends(get_db),
    event_broker: ProfileEventBroker = Depends(get_event_broker),
    current_user: User = Depends(require_owner),
) -> ProfileResponse:
    await ensure_profile(session, current_user)
    profile = await complete_onboarding(
        session,
        event_broker,
        user_id,
        industry_type=payload.industry_type,
        brand_logo_url=payload.brand_logo_url,
        brand_style_context=payload.brand_style_context,
        brand_name=payload.brand_name,
    )
    return ProfileResponse.model_validate(profile)


@router.get("/{user_id}/events")
async def stream_profile_events(
    user_id: uuid.UUID,
    request: Request,
    event_broker: ProfileEventBroker = Depends(get_event_broker),
    _: User = Depends(require_owner),
):
    async def event_generator():
        async for event in event_broker.stream(user_id):
            if await request.is_disconnected():
                break
            yield {"event": event.get("type", "message"), "data": json.dumps(event)}

    return EventSourceResponse(event_generator())
