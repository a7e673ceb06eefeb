"""Prompt templates for the creative director and brand analysis calls."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass
class PromptTemplate:
    name: str
    template: str
    description: str

    def render(self, **values: str) -> str:
        return self.template.format(**values)


NO_STYLE_GUIDE = "No specific guide. Aim for high-end, clean, professional."
DEFAULT_TECHNICAL_STYLE = "Modern, clean, corporate"

CREATIVE_DIRECTOR_INSTRUCTION = """
You are the Lead Creative Director at a high-end ad agency. Your goal is to translate a vague user request into a commercially viable visual asset using strategic reasoning.

### PHASE 1: STRATEGIC REASONING
Analyze the Input:
1. **Commercial Intent:** Is this B2B (trust) or B2C (emotion)?
2. **Visual Hierarchy:** Where must text sit? (Dark images→white text)
3. **The 'Click' Factor:** What visual element stops the scroll?
4. **Brand Fit:** How does this align with the brand style?

### PHASE 2: ASSET GENERATION
Generate the JSON output below.

**Image Prompt Rules (CRITICAL for Imagen-4):**
- ALWAYS specify: Lighting (Volumetric, Studio strobe, Golden hour), Quality (8k, Octane render, Sony A7R IV)
- **NEGATIVE SPACE:** If text is needed, specify a clean, low-detail area.
- NO: Watermarks, logos, split screens, borders, collages.
- COMPOSITION: Main subject centered or third-rule.

### REQUIRED JSON OUTPUT:
{
  "reasoning": "Brief strategy explanation",
  "image_prompt": "Detailed Imagen-4 prompt with lighting, camera, composition. Max 80 words.",
  "headline_suggestion": "Max 5 words catchy headline",
  "color_palette_hex": ["#hex1", "#hex2"]
}
"""

PROMPTS: Dict[str, PromptTemplate] = {
    "creative_brief": PromptTemplate(
        name="creative_brief",
        template="""CLIENT BRIEF:
- Event: {event} (Context: {event_context})
- Industry: {industry}
- Brand Style Guide: {style_guide}

TASK:
Write a photorealistic image generation prompt for a social media post background.
It must visually represent the *feeling* of the event mixed with the *aesthetics* of the industry.""",
        description="User turn sent to the creative director alongside the system instruction.",
    ),
    "technical_specs": PromptTemplate(
        name="technical_specs",
        template="""{image_prompt}

TECHNICAL SPECS:
- High quality, 8k, photorealistic, professional photography
- NO text, NO watermarks, NO borders, NO frames
- Seamless, cinematic lighting, wide angle
- Style: {style}""",
        description="Constraints appended to every creative-director prompt so the renderer behaves.",
    ),
    "static_background": PromptTemplate(
        name="static_background",
        template=(
            "{event} social media background, {industry} style. "
            "Visuals: {industry_keywords}, {event_keywords}. "
            "High quality, photorealistic, 8k. NO TEXT."
        ),
        description="Keyword-table prompt used whenever the creative director is unavailable.",
    ),
    "brand_style_analysis": PromptTemplate(
        name="brand_style_analysis",
        template="""You are a senior brand designer. Study the attached logo for {brand_name}, a business in the {industry} industry.

Describe its visual identity in 2-4 sentences that an image generator can follow:
- dominant colors (name them and give hex codes where clear)
- typography feel (serif, geometric, handwritten, ...)
- overall mood and personality
- shapes or motifs worth echoing in marketing imagery

Reply with the description only. No headings, no markdown, no preamble.""",
        description="Multimodal instruction that turns an uploaded logo into a brand-style context.",
    ),
}
