"""Festival post prompt composer.

The composer asks a Gemini "creative director" to turn an event, an industry
and the brand's style notes into an image-generation prompt.  Whenever that
call cannot produce a usable answer the composer falls back to a keyword
template, so callers always receive a prompt; the returned ``ComposedPrompt``
records which path produced it.
"""
from __future__ import annotations

import asyncio
import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError

from prompts.festivals import event_context, event_keywords, industry_keywords
from prompts.library import (
    CREATIVE_DIRECTOR_INSTRUCTION,
    DEFAULT_TECHNICAL_STYLE,
    NO_STYLE_GUIDE,
    PROMPTS,
)
from shared.config import Settings

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


class CreativeDirectorError(RuntimeError):
    """Raised when the creative director call yields nothing usable."""


class PromptSource(str, enum.Enum):
    CREATIVE_DIRECTOR = "creative_director"
    FALLBACK = "fallback"


class CreativeDirectorResponse(BaseModel):
    reasoning: str
    image_prompt: str = Field(..., min_length=1)
    headline_suggestion: str
    color_palette_hex: List[str] = Field(default_factory=list)


@dataclass
class ComposedPrompt:
    text: str
    source: PromptSource
    director: Optional[CreativeDirectorResponse] = None
    error: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.source is PromptSource.FALLBACK


@dataclass(frozen=True)
class CreativeDirectorConfig:
    """Everything the composer needs to reach the model, fixed at startup."""

    model: str = "gemini-1.5-flash-001"
    api_key: Optional[str] = None
    project: Optional[str] = None
    location: str = "us-central1"
    timeout_seconds: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "CreativeDirectorConfig":
        return cls(
            model=settings.creative_director_model,
            api_key=settings.gemini_api_key,
            project=settings.gcp_project,
            location=settings.gcp_location,
            timeout_seconds=settings.creative_director_timeout,
        )


def build_genai_client(
    api_key: Optional[str], project: Optional[str], location: str
) -> Optional[genai.Client]:
    """Create a Gemini client from an API key, or Vertex AI when only a project is set."""

    if api_key:
        return genai.Client(api_key=api_key)
    if project:
        return genai.Client(vertexai=True, project=project, location=location)
    return None


def _style_or_none(brand_style_context: Optional[str]) -> Optional[str]:
    if brand_style_context and brand_style_context.strip():
        return brand_style_context
    return None


def build_brief(event: str, industry: str, brand_style_context: Optional[str] = None) -> str:
    return PROMPTS["creative_brief"].render(
        event=event,
        event_context=event_context(event),
        industry=industry,
        style_guide=_style_or_none(brand_style_context) or NO_STYLE_GUIDE,
    )


def generate_static_prompt(
    event: str, industry: str, brand_style_context: Optional[str] = None
) -> str:
    """Deterministic keyword prompt; unknown keys use the default table rows."""

    prompt = PROMPTS["static_background"].render(
        event=event,
        industry=industry,
        industry_keywords=industry_keywords(industry),
        event_keywords=event_keywords(event),
    )
    style = _style_or_none(brand_style_context)
    if style:
        prompt += f" Style: {style}"
    return prompt


def finalize_prompt(
    director: CreativeDirectorResponse, brand_style_context: Optional[str] = None
) -> str:
    return PROMPTS["technical_specs"].render(
        image_prompt=director.image_prompt.strip(),
        style=_style_or_none(brand_style_context) or DEFAULT_TECHNICAL_STYLE,
    )


def first_candidate_text(response: Any) -> Optional[str]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    return getattr(parts[0], "text", None)


def parse_director_response(text: str) -> CreativeDirectorResponse:
    cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text.strip()))
    try:
        return CreativeDirectorResponse.model_validate_json(cleaned)
    except ValidationError as exc:
        raise CreativeDirectorError(f"Malformed creative director output: {exc}") from exc


class PromptComposer:
    """Writes image prompts for festival posts, preferring the creative director."""

    def __init__(self, config: CreativeDirectorConfig, client: Optional[Any] = None) -> None:
        self.config = config
        if client is None:
            client = build_genai_client(config.api_key, config.project, config.location)
        self.client = client

    def _request_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=CREATIVE_DIRECTOR_INSTRUCTION,
            response_mime_type="application/json",
            safety_settings=[
                types.SafetySetting(
                    category=types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
                    threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH,
                )
            ],
        )

    async def ask_creative_director(self, brief: str) -> CreativeDirectorResponse:
        if self.client is None:
            raise CreativeDirectorError("No generative model client configured")
        call = self.client.aio.models.generate_content(
            model=self.config.model,
            contents=[types.Content(role="user", parts=[types.Part(text=brief)])],
            config=self._request_config(),
        )
        if self.config.timeout_seconds:
            response = await asyncio.wait_for(call, timeout=self.config.timeout_seconds)
        else:
            response = await call
        text = first_candidate_text(response)
        if not text:
            raise CreativeDirectorError("No response from Creative Director")
        return parse_director_response(text)

    async def compose(
        self, event: str, industry: str, brand_style_context: Optional[str] = None
    ) -> ComposedPrompt:
        logger.info("Creative director: analyzing strategy for %s in %s", event, industry)
        try:
            director = await self.ask_creative_director(
                build_brief(event, industry, brand_style_context)
            )
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"
            logger.warning("Creative director unavailable, falling back to keywords (%s)", reason)
            return ComposedPrompt(
                text=generate_static_prompt(event, industry, brand_style_context),
                source=PromptSource.FALLBACK,
                error=reason,
            )
        logger.info("Creative director strategy: %s", director.reasoning)
        return ComposedPrompt(
            text=finalize_prompt(director, brand_style_context),
            source=PromptSource.CREATIVE_DIRECTOR,
            director=director,
        )
