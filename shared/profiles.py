"""Profile persistence: idempotent upserts, the sign-in hook and onboarding."""
from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .events import ProfileEventBroker, emit_profile_ready
from .models import DEFAULT_SUBSCRIPTION_PLAN, Profile, User, utcnow

logger = logging.getLogger(__name__)

UPSERTABLE_FIELDS = (
    "email",
    "full_name",
    "brand_name",
    "brand_description",
    "brand_logo_url",
    "industry_type",
    "brand_style_context",
    "subscription_plan",
    "free_images_generated",
)


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> Optional[Profile]:
    return await session.get(Profile, user_id)


def is_brand_ready(profile: Optional[Profile]) -> bool:
    return bool(profile is not None and profile.industry_type)


async def upsert_profile(session: AsyncSession, user_id: uuid.UUID, **fields: Any) -> Profile:
    """Create or update a profile; ``None`` values never overwrite stored data."""

    unknown = set(fields) - set(UPSERTABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    values = {key: value for key, value in fields.items() if value is not None}
    profile = await session.get(Profile, user_id)
    if profile is None:
        profile = Profile(id=user_id, **values)
        session.add(profile)
        try:
            await session.commit()
        except IntegrityError:
            # A concurrent request inserted the row first; merge into it.
            await session.rollback()
            profile = await session.get(Profile, user_id)
            if profile is None:
                raise
            logger.info("Profile for user %s created concurrently, merging", user_id)
            _merge(profile, values)
            await session.commit()
    else:
        _merge(profile, values)
        await session.commit()
    await session.refresh(profile)
    return profile


def _merge(profile: Profile, values: dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(profile, key, value)
    profile.updated_at = utcnow()


async def ensure_profile(session: AsyncSession, user: User, *, new_signup: bool = False) -> Profile:
    """Make sure a signed-in user has a profile row.

    Fresh signups start on the free plan with no images generated; existing
    accounts that somehow lack a row get a minimal one; existing rows are
    returned untouched.
    """

    existing = await session.get(Profile, user.id)
    if existing is not None:
        return existing
    if new_signup:
        logger.info("Creating signup profile for user %s", user.id)
        return await upsert_profile(
            session,
            user.id,
            email=user.email,
            subscription_plan=DEFAULT_SUBSCRIPTION_PLAN,
            free_images_generated=0,
        )
    logger.info("Creating minimal profile for existing user %s", user.id)
    return await upsert_profile(session, user.id, email=user.email)


async def complete_onboarding(
    session: AsyncSession,
    event_broker: ProfileEventBroker,
    user_id: uuid.UUID,
    *,
    industry_type: str,
    brand_logo_url: Optional[str] = None,
    brand_style_context: Optional[str] = None,
    brand_name: Optional[str] = None,
) -> Profile:
    profile = await upsert_profile(
        session,
        user_id,
        industry_type=industry_type,
        brand_logo_url=brand_logo_url,
        brand_style_context=brand_style_context,
        brand_name=brand_name,
    )
    await emit_profile_ready(event_broker, user_id, profile.industry_type, profile.brand_logo_url)
    return profile
