"""Residentials API - the caller's residential"""
from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_current_user, get_residential_store
from domain.models.residential import ResidentialRead
from domain.models.user import User
from infrastructure.stores import ResidentialStore

router = APIRouter()


@router.get("/me", response_model=ResidentialRead)
async def get_my_residential(
    user: User = Depends(get_current_user),
    residentials: ResidentialStore = Depends(get_residential_store),
):
    residential = await residentials.get(user.residential_id)
    if not residential:
        raise HTTPException(status_code=404, detail="Residential not found")
    return residential
