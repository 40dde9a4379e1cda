"""Access log API - owners review validation attempts at their residential"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_access_log_store, require_owner
from domain.models.access_log import AccessLogRead
from domain.models.user import User
from infrastructure.stores import AccessLogStore

router = APIRouter()


@router.get("/", response_model=List[AccessLogRead])
async def list_access_logs(
    is_valid: Optional[bool] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    owner: User = Depends(require_owner),
    access_logs: AccessLogStore = Depends(get_access_log_store),
):
    """Newest first. Scans of unknown payloads are not attributable and are not listed."""
    return await access_logs.list_by_residential(owner.residential_id, is_valid=is_valid, limit=limit)
