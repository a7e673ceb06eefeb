from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from gen.composer import PromptComposer
from prompts.festivals import Festival, Industry, upcoming_festivals
from shared.models import User
from shared.profiles import get_profile

from ..dependencies import get_composer, get_current_user, get_db
from ..schemas.prompts import (
    FestivalCatalogResponse,
    FestivalEntry,
    PromptRequest,
    PromptResponse,
    UpcomingFestivalEntry,
)

router = APIRouter(tags=["prompts"])


@router.post("/prompts", response_model=PromptResponse)
async def compose_prompt(
    payload: PromptRequest,
    session: AsyncSession = Depends(get_db),
    composer: PromptComposer = Depends(get_composer),
    current_user: User = Depends(get_current_user),
) -> PromptResponse:
    industry = payload.industry
    style = payload.brand_style_context
    if industry is None or style is None:
        profile = await get_profile(session, current_user.id)
        if profile is not None:
            industry = industry or profile.industry_type
            style = style if style is not None else profile.brand_style_context
    if not industry:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Complete brand onboarding or pass an industry",
        )

    result = await composer.compose(payload.event, industry, style)
    director = result.director
    return PromptResponse(
        prompt=result.text,
        source=result.source,
        event=payload.event,
        industry=industry,
        reasoning=director.reasoning if director else None,
        headline_suggestion=director.headline_suggestion if director else None,
        color_palette_hex=list(director.color_palette_hex) if director else [],
    )


@router.get("/festivals", response_model=FestivalCatalogResponse)
def festival_catalog(
    limit: int = Query(5, ge=0, le=20),
    on: dt.date | None = Query(None, description="Reference date, defaults to today"),
) -> FestivalCatalogResponse:
    today = on or dt.date.today()
    return FestivalCatalogResponse(
        festivals=[FestivalEntry(name=item.label, slug=item.slug) for item in Festival],
        industries=[FestivalEntry(name=item.label, slug=item.slug) for item in Industry],
        upcoming=[
            UpcomingFestivalEntry(
                name=entry.festival.label,
                slug=entry.festival.slug,
                date=entry.date,
                days_until=entry.days_until,
            )
            for entry in upcoming_festivals(today, limit=limit)
        ],
    )
