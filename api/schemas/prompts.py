from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

from gen.composer import PromptSource


class PromptRequest(BaseModel):
    event: str = Field(..., min_length=1)
    industry: Optional[str] = Field(None, description="Defaults to the profile's industry")
    brand_style_context: Optional[str] = Field(
        None, description="Defaults to the profile's saved brand style"
    )


class PromptResponse(BaseModel):
    prompt: str
    source: PromptSource
    event: str
    industry: str
    reasoning: Optional[str] = None
    headline_suggestion: Optional[str] = None
    color_palette_hex: List[str] = Field(default_factory=list)


class FestivalEntry(BaseModel):
    name: str
    slug: str


class UpcomingFestivalEntry(FestivalEntry):
    date: dt.date
    days_until: int


class FestivalCatalogResponse(BaseModel):
    festivals: List[FestivalEntry]
    industries: List[FestivalEntry]
    upcoming: List[UpcomingFestivalEntry]
