"""Logo-driven brand style suggestions."""
from __future__ import annotations

import logging
from typing import Any, Optional

from google.genai import types

from prompts.library import PROMPTS
from shared.config import Settings

from .composer import build_genai_client, first_candidate_text

logger = logging.getLogger(__name__)

DEFAULT_BRAND_NAME = "this brand"
DEFAULT_INDUSTRY_LABEL = "general business"


class BrandStyleError(RuntimeError):
    """Raised when a style description cannot be produced for a logo."""


class BrandStyleAnalyzer:
    """Describes a brand's visual identity from its logo using a multimodal model."""

    def __init__(self, model: str, client: Optional[Any] = None) -> None:
        self.model = model
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrandStyleAnalyzer":
        client = build_genai_client(
            settings.gemini_api_key, settings.gcp_project, settings.gcp_location
        )
        return cls(model=settings.brand_style_model, client=client)

    async def analyze(
        self,
        logo: bytes,
        content_type: str,
        industry: Optional[str] = None,
        brand_name: Optional[str] = None,
    ) -> str:
        if self.client is None:
            raise BrandStyleError("Brand style analysis is not configured")
        if not logo:
            raise BrandStyleError("No logo to analyze")

        instruction = PROMPTS["brand_style_analysis"].render(
            brand_name=brand_name or DEFAULT_BRAND_NAME,
            industry=industry or DEFAULT_INDUSTRY_LABEL,
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=logo, mime_type=content_type),
                    instruction,
                ],
            )
        except Exception as exc:
            logger.error("Brand style analysis failed: %s", exc)
            raise BrandStyleError(str(exc)) from exc

        text = first_candidate_text(response)
        if not text or not text.strip():
            raise BrandStyleError("Model returned no style description")
        description = " ".join(text.split())
        logger.info("Generated brand style context (%d chars)", len(description))
        return description
