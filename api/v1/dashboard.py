"""Dashboard API - QR and resident counters for the current user"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_current_user, get_qr_code_store, get_user_store
from domain.clock import utcnow
from domain.models.user import User
from domain.services.qr_issuance import is_currently_active
from infrastructure.stores import QrCodeStore, UserStore

router = APIRouter()


class DashboardStats(BaseModel):
    role: str
    total_qr: int
    active_qr: int
    total_residents: Optional[int] = None  # owners only


@router.get("/", response_model=DashboardStats)
async def get_stats(
    user: User = Depends(get_current_user),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
    users: UserStore = Depends(get_user_store),
):
    now = utcnow()

    if user.is_owner:
        # Both lists share one session, so they are fetched one after the other
        codes = await qr_codes.list_by_residential(user.residential_id)
        residents = await users.list_residents(user.residential_id)
        return DashboardStats(
            role=user.role,
            total_qr=len(codes),
            active_qr=sum(1 for qr in codes if is_currently_active(qr, now)),
            total_residents=len(residents),
        )

    codes = await qr_codes.list_by_user(user.id)
    return DashboardStats(
        role=user.role,
        total_qr=len(codes),
        active_qr=sum(1 for qr in codes if is_currently_active(qr, now)),
    )
