"""Identity models - credentials owned by the identity provider, not by the app"""
from datetime import datetime
from uuid import uuid4
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from domain.clock import utcnow


class Identity(SQLModel, table=True):
    __tablename__ = "identities"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class RevokedSession(SQLModel, table=True):
    """Sign-out denylist, keyed by the session token's jti."""
    __tablename__ = "revoked_sessions"

    jti: str = Field(primary_key=True)
    identity_id: str = Field(index=True)
    revoked_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
