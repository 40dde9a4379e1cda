"""Residents API - owners list residents and revoke/restore their access.

Revoking a resident only flips User.active; QR codes already issued by that
resident keep their own is_active/expires_at and stay valid.
"""
from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_user_store, require_owner
from domain.models.user import User, UserRead, UserUpdate
from infrastructure.stores import UserStore

router = APIRouter()
logger = structlog.get_logger()


async def _get_resident(users: UserStore, owner: User, resident_id: str) -> User:
    resident = await users.get(resident_id)
    if not resident or not resident.is_resident or resident.residential_id != owner.residential_id:
        raise HTTPException(status_code=404, detail="Resident not found")
    return resident


@router.get("/", response_model=List[UserRead])
async def list_residents(
    owner: User = Depends(require_owner),
    users: UserStore = Depends(get_user_store),
):
    """List residents of the owner's residential, newest first"""
    return await users.list_residents(owner.residential_id)


@router.post("/{resident_id}/revoke", response_model=UserRead)
async def revoke_access(
    resident_id: str,
    owner: User = Depends(require_owner),
    users: UserStore = Depends(get_user_store),
):
    await _get_resident(users, owner, resident_id)
    resident = await users.update(resident_id, UserUpdate(active=False))
    logger.info("resident_access_revoked", resident_id=resident_id, owner_id=owner.id)
    return resident


@router.post("/{resident_id}/restore", response_model=UserRead)
async def restore_access(
    resident_id: str,
    owner: User = Depends(require_owner),
    users: UserStore = Depends(get_user_store),
):
    await _get_resident(users, owner, resident_id)
    resident = await users.update(resident_id, UserUpdate(active=True))
    logger.info("resident_access_restored", resident_id=resident_id, owner_id=owner.id)
    return resident
