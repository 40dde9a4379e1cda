"""Invitations API - owners invite residents; invitees accept with a token"""
from datetime import datetime
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field

from api.deps import (
    get_identity_provider,
    get_invitation_store,
    get_residential_store,
    get_user_store,
    require_owner,
)
from domain.clock import utcnow
from domain.errors import DomainError
from domain.models.invitation import Invitation
from domain.models.user import User, UserRead
from domain.services.invitations import (
    acceptance_url,
    accept_invitation,
    create_invitation,
    effective_status,
)
from infrastructure.identity import IdentityError, LocalIdentityProvider
from infrastructure.stores import InvitationStore, ResidentialStore, UserStore

router = APIRouter()
logger = structlog.get_logger()


class CreateInvitationRequest(BaseModel):
    email: EmailStr


class InvitationView(BaseModel):
    id: str
    residential_id: str
    email: str
    token: str
    status: str  # effective status: pending | accepted | expired
    expires_at: datetime
    created_at: datetime
    accept_url: str


class InvitationPublicView(BaseModel):
    email: str
    status: str
    expires_at: datetime
    residential_name: Optional[str] = None


class AcceptInvitationRequest(BaseModel):
    token: str = Field(min_length=1)
    name: str = Field(min_length=1)
    apartment: str = Field(min_length=1)
    password: str
    confirm_password: str


def _view(invitation: Invitation, now: datetime) -> InvitationView:
    return InvitationView(
        id=invitation.id,
        residential_id=invitation.residential_id,
        email=invitation.email,
        token=invitation.token,
        status=effective_status(invitation, now),
        expires_at=invitation.expires_at,
        created_at=invitation.created_at,
        accept_url=acceptance_url(invitation.token),
    )


@router.post("/", response_model=InvitationView, status_code=201)
async def invite_resident(
    req: CreateInvitationRequest,
    owner: User = Depends(require_owner),
    invitations: InvitationStore = Depends(get_invitation_store),
    users: UserStore = Depends(get_user_store),
):
    """Create a pending invitation valid for 7 days"""
    try:
        invitation = await create_invitation(invitations, users, owner.residential_id, req.email)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _view(invitation, utcnow())


@router.get("/", response_model=List[InvitationView])
async def list_invitations(
    owner: User = Depends(require_owner),
    invitations: InvitationStore = Depends(get_invitation_store),
):
    """List invitations of the owner's residential, newest first"""
    now = utcnow()
    return [_view(inv, now) for inv in await invitations.list_by_residential(owner.residential_id)]


@router.get("/by-token/{token}", response_model=InvitationPublicView)
async def get_invitation_by_token(
    token: str,
    invitations: InvitationStore = Depends(get_invitation_store),
    residentials: ResidentialStore = Depends(get_residential_store),
):
    """Public lookup used by the acceptance page"""
    invitation = await invitations.get_by_token(token)
    if not invitation:
        raise HTTPException(status_code=404, detail="Invitation not found")

    residential = await residentials.get(invitation.residential_id)
    return InvitationPublicView(
        email=invitation.email,
        status=effective_status(invitation),
        expires_at=invitation.expires_at,
        residential_name=residential.name if residential else None,
    )


@router.post("/accept", response_model=UserRead, status_code=201)
async def accept(
    req: AcceptInvitationRequest,
    invitations: InvitationStore = Depends(get_invitation_store),
    users: UserStore = Depends(get_user_store),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
):
    """Register the invitee as a resident of the inviting residential"""
    try:
        user = await accept_invitation(
            token=req.token,
            name=req.name,
            apartment=req.apartment,
            password=req.password,
            confirm_password=req.confirm_password,
            invitations=invitations,
            users=users,
            identity=identity,
        )
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except IdentityError as e:
        logger.warning("invitation_acceptance_failed", error=e.code)
        raise HTTPException(status_code=400, detail=e.code)

    return user
