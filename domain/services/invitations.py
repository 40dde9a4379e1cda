"""Resident invitations: issuance by the owner and acceptance by the invitee.

The stored status only ever moves pending -> accepted. An invitation past its
expires_at is reported as expired at read time; nothing rewrites the row.
"""

from __future__ import annotations

import secrets
import time
from datetime import datetime, timedelta
from typing import Optional

import structlog

from config import settings
from domain.clock import as_utc, utcnow
from domain.errors import Conflict, Gone, NotFound
from domain.models.invitation import (
    Invitation,
    InvitationCreate,
    InvitationUpdate,
    INVITATION_ACCEPTED,
    INVITATION_EXPIRED,
    INVITATION_PENDING,
)
from domain.models.user import User, UserCreate, ROLE_RESIDENT
from domain.services.passwords import check_new_password, require_text
from infrastructure.identity import IdentityProvider
from infrastructure.stores import InvitationStore, UserStore

logger = structlog.get_logger()


def generate_invitation_token() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_urlsafe(12)}-{secrets.token_urlsafe(12)}"


def acceptance_url(token: str) -> str:
    base = (settings.public_base_url or "").rstrip("/")
    return f"{base}/invitation/accept?token={token}"


def effective_status(invitation: Invitation, now: Optional[datetime] = None) -> str:
    now = as_utc(now) if now else utcnow()
    if invitation.status == INVITATION_PENDING and as_utc(invitation.expires_at) <= now:
        return INVITATION_EXPIRED
    return invitation.status


async def create_invitation(
    invitations: InvitationStore,
    users: UserStore,
    residential_id: str,
    email: str,
    now: Optional[datetime] = None,
) -> Invitation:
    """Pending invitation for an email that has no account yet."""
    email = email.strip().lower()
    if await users.get_by_email(email):
        raise Conflict("A user with this email already exists")

    now = as_utc(now) if now else utcnow()
    invitation = await invitations.create(
        InvitationCreate(
            residential_id=residential_id,
            email=email,
            token=generate_invitation_token(),
            status=INVITATION_PENDING,
            expires_at=now + timedelta(days=settings.invitation_validity_days),
        )
    )
    logger.info("invitation_created", invitation_id=invitation.id, residential_id=residential_id)
    return invitation


async def get_acceptable_invitation(
    invitations: InvitationStore,
    token: str,
    now: Optional[datetime] = None,
) -> Invitation:
    """Load an invitation that can still be accepted, or raise."""
    invitation = await invitations.get_by_token(token) if token else None
    if not invitation:
        raise NotFound("Invitation not found")

    if invitation.status != INVITATION_PENDING:
        raise Conflict("This invitation has already been used or has expired")

    if effective_status(invitation, now) == INVITATION_EXPIRED:
        raise Gone("This invitation has expired")

    return invitation


async def accept_invitation(
    *,
    token: str,
    name: str,
    apartment: str,
    password: str,
    confirm_password: str,
    invitations: InvitationStore,
    users: UserStore,
    identity: IdentityProvider,
    now: Optional[datetime] = None,
) -> User:
    """Register the invitee and bind them to the invitation's residential.

    Steps are not transactional: if creating the user or marking the
    invitation fails, the identity already registered is left behind.
    """
    invitation = await get_acceptable_invitation(invitations, token, now)
    name = require_text(name, "Name")
    apartment = require_text(apartment, "Apartment")
    check_new_password(password, confirm_password)

    identity_id = await identity.register(invitation.email, password)

    user = await users.create(
        UserCreate(
            id=identity_id,
            email=invitation.email,
            role=ROLE_RESIDENT,
            residential_id=invitation.residential_id,
            apartment=apartment,
            name=name,
            active=True,
        )
    )

    await invitations.update(invitation.id, InvitationUpdate(status=INVITATION_ACCEPTED))
    logger.info("invitation_accepted", invitation_id=invitation.id, user_id=user.id)
    return user
