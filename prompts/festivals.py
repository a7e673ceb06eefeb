"""Industries, festivals and the keyword tables used to describe them visually."""
from __future__ import annotations

import datetime as dt
import enum
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type, TypeVar

_E = TypeVar("_E", bound="_LabelledEnum")


def _slugify(label: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", label.lower()).strip("-")


class _LabelledEnum(str, enum.Enum):
    """Enum whose value is the display label, resolvable from loose user input."""

    @property
    def label(self) -> str:
        return self.value

    @property
    def slug(self) -> str:
        return _slugify(self.value)

    @classmethod
    def resolve(cls: Type[_E], raw: Optional[str]) -> Optional[_E]:
        """Match a label, slug or member name case-insensitively."""

        if not raw or not raw.strip():
            return None
        wanted = _slugify(raw)
        for member in cls:
            if wanted in (member.slug, _slugify(member.name)):
                return member
        return None


class Industry(_LabelledEnum):
    EDUCATION = "Education"
    REAL_ESTATE = "Real Estate"
    TECH_STARTUP = "Tech Startup"
    MANUFACTURING = "Manufacturing"
    RETAIL_FASHION = "Retail & Fashion"
    FOOD_CAFE = "Food & Cafe"
    HEALTHCARE = "Healthcare"
    FINANCE = "Finance"
    FITNESS = "Fitness & Wellness"
    BEAUTY = "Beauty & Salon"


class Festival(_LabelledEnum):
    LOHRI = "Lohri"
    MAKAR_SANKRANTI = "Makar Sankranti"
    REPUBLIC_DAY = "Republic Day"
    PONGAL = "Pongal"
    HOLI = "Holi"
    WOMENS_DAY = "Women's Day"
    INDEPENDENCE_DAY = "Independence Day"
    RAKSHA_BANDHAN = "Raksha Bandhan"
    GANESH_CHATURTHI = "Ganesh Chaturthi"
    TEACHERS_DAY = "Teachers' Day"
    NAVRATRI = "Navratri"
    DIWALI = "Diwali"
    CHRISTMAS = "Christmas"
    NEW_YEAR = "New Year"


DEFAULT_INDUSTRY = Industry.EDUCATION
DEFAULT_FESTIVAL = Festival.REPUBLIC_DAY
DEFAULT_EVENT_CONTEXT = "Celebration"

INDUSTRY_KEYWORDS: Dict[Industry, str] = {
    Industry.EDUCATION: "bright modern classroom, open books and notebooks, students learning together, warm academic atmosphere",
    Industry.REAL_ESTATE: "elegant modern home exterior, spacious sunlit living room, architectural lines, keys and doorway",
    Industry.TECH_STARTUP: "sleek open-plan office, glowing screens, abstract circuit patterns, futuristic blue accents",
    Industry.MANUFACTURING: "clean industrial shop floor, precision machinery, steel and gears, safety-first workers",
    Industry.RETAIL_FASHION: "stylish boutique interior, fabric textures, curated clothing racks, soft fashion lighting",
    Industry.FOOD_CAFE: "cozy cafe counter, steaming coffee cups, fresh pastries, rustic wooden table",
    Industry.HEALTHCARE: "calm clinical environment, caring doctor silhouette, stethoscope, soft teal and white tones",
    Industry.FINANCE: "polished corporate desk, upward growth charts, gold coins, trustworthy navy palette",
    Industry.FITNESS: "energetic gym space, dumbbells and yoga mats, morning light, healthy lifestyle",
    Industry.BEAUTY: "luxurious salon interior, skincare bottles, fresh flowers, soft blush tones",
}

EVENT_KEYWORDS: Dict[Festival, str] = {
    Festival.LOHRI: "roaring bonfire at night, popcorn and rewri, bhangra dancers, winter harvest fields",
    Festival.MAKAR_SANKRANTI: "colorful kites in a clear sky, sesame and jaggery sweets, bright sun, harvest",
    Festival.REPUBLIC_DAY: "Indian tricolor flag, saffron white and green accents, Ashoka Chakra, patriotic parade",
    Festival.PONGAL: "clay pot overflowing with rice, sugarcane stalks, kolam patterns, village sunrise",
    Festival.HOLI: "clouds of vibrant color powder, splashes of pink and yellow, joyful spring celebration",
    Festival.WOMENS_DAY: "purple ribbons, confident women silhouettes, fresh flowers, empowerment",
    Festival.INDEPENDENCE_DAY: "tricolor kites and flags, Red Fort silhouette, fireworks, national pride",
    Festival.RAKSHA_BANDHAN: "ornate rakhi threads, sweets platter, sibling bond, warm golden light",
    Festival.GANESH_CHATURTHI: "Lord Ganesha idol, marigold garlands, modak sweets, festive pandal lights",
    Festival.TEACHERS_DAY: "chalkboard and apple, gratitude cards, warm classroom glow",
    Festival.NAVRATRI: "garba dancers in colorful chaniya choli, dandiya sticks, nine nights of lights",
    Festival.DIWALI: "glowing diyas, rangoli patterns, marigold flowers, warm golden fairy lights, fireworks",
    Festival.CHRISTMAS: "decorated Christmas tree, twinkling lights, gift boxes, snowy evening",
    Festival.NEW_YEAR: "midnight fireworks, champagne sparkle, countdown clock, confetti",
}

EVENT_CONTEXTS: Dict[Festival, str] = {
    Festival.LOHRI: "North Indian harvest festival, bonfires, winter night",
    Festival.MAKAR_SANKRANTI: "Day festival, kite flying, sun, harvest",
    Festival.REPUBLIC_DAY: "National pride, military parade, flag colors",
    Festival.DIWALI: "Festival of lights, prosperity, family gatherings",
    Festival.HOLI: "Festival of colors, spring, playful energy",
    Festival.INDEPENDENCE_DAY: "Freedom, national pride, flag hoisting",
}

# Month/day of festivals that fall on the same Gregorian date every year.
# Lunar-calendar festivals (Holi, Diwali, ...) move every year and are not listed.
FIXED_DATES: Dict[Festival, Tuple[int, int]] = {
    Festival.NEW_YEAR: (1, 1),
    Festival.LOHRI: (1, 13),
    Festival.MAKAR_SANKRANTI: (1, 14),
    Festival.PONGAL: (1, 15),
    Festival.REPUBLIC_DAY: (1, 26),
    Festival.WOMENS_DAY: (3, 8),
    Festival.INDEPENDENCE_DAY: (8, 15),
    Festival.TEACHERS_DAY: (9, 5),
    Festival.CHRISTMAS: (12, 25),
}


# Lookups go through ``resolve``, so onboarding slugs ("real-estate", "diwali")
# hit their own rows instead of the defaults. Only unrecognised keys fall back.
def industry_keywords(industry: Optional[str]) -> str:
    return INDUSTRY_KEYWORDS[Industry.resolve(industry) or DEFAULT_INDUSTRY]


def event_keywords(event: Optional[str]) -> str:
    return EVENT_KEYWORDS[Festival.resolve(event) or DEFAULT_FESTIVAL]


def event_context(event: Optional[str]) -> str:
    festival = Festival.resolve(event)
    if festival is None:
        return DEFAULT_EVENT_CONTEXT
    return EVENT_CONTEXTS.get(festival, DEFAULT_EVENT_CONTEXT)


@dataclass(frozen=True)
class UpcomingFestival:
    festival: Festival
    date: dt.date
    days_until: int


def _next_occurrence(month: int, day: int, today: dt.date) -> dt.date:
    candidate = dt.date(today.year, month, day)
    if candidate < today:
        candidate = dt.date(today.year + 1, month, day)
    return candidate


def upcoming_festivals(today: dt.date, limit: int = 5) -> List[UpcomingFestival]:
    """Return the next ``limit`` fixed-date festivals on or after ``today``."""

    upcoming = []
    for festival, (month, day) in FIXED_DATES.items():
        when = _next_occurrence(month, day, today)
        upcoming.append(UpcomingFestival(festival=festival, date=when, days_until=(when - today).days))
    upcoming.sort(key=lambda item: (item.date, item.festival.label))
    return upcoming[: max(limit, 0)]
