"""Database models for accounts and brand profiles."""
from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()

DEFAULT_SUBSCRIPTION_PLAN = "free"


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""

    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True)
    email = Column(String(320), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    tokens = relationship("SessionToken", back_populates="user")


class SessionToken(Base):
    __tablename__ = "session_tokens"

    id = Column(UUID(as_uuid=True), primary_key=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    token = Column(String(128), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="tokens")


class Profile(Base):
    """Brand profile, one row per user, keyed by the user's id."""

    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(320))
    full_name = Column(String(255))
    brand_name = Column(String(255))
    brand_description = Column(Text)
    brand_logo_url = Column(Text)
    industry_type = Column(String(64), index=True)
    # AI-suggested (and possibly user-edited) description of the visual identity
    brand_style_context = Column(Text)
    subscription_plan = Column(String(32))
    free_images_generated = Column(Integer)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User")


# Columns the onboarding flow depends on; checked by ``shared.schema``.
REQUIRED_PROFILE_COLUMNS = ("id", "email", "industry_type", "brand_logo_url", "brand_style_context")
