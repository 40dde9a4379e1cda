"""Invitation model - owner invites a resident by email"""
from typing import Optional
from datetime import datetime
from uuid import uuid4
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from domain.clock import utcnow

INVITATION_PENDING = "pending"
INVITATION_ACCEPTED = "accepted"
INVITATION_EXPIRED = "expired"


class InvitationBase(SQLModel):
    residential_id: str = Field(index=True)
    email: str = Field(index=True)
    token: str = Field(unique=True, index=True)
    status: str = Field(default=INVITATION_PENDING)  # pending | accepted | expired
    expires_at: datetime = Field(sa_type=DateTime(timezone=True))


class Invitation(InvitationBase, table=True):
    __tablename__ = "invitations"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class InvitationCreate(InvitationBase):
    pass


class InvitationRead(InvitationBase):
    id: str
    created_at: datetime


class InvitationUpdate(SQLModel):
    status: Optional[str] = None
