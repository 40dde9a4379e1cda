"""QR API - residents issue visitor QR codes; owners and residents review them.

Codes are valid for a fixed window (4 hours by default) from issuance.
Deleting is a hard delete, allowed to the issuing resident and to the owner
of the same residential.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from api.deps import (
    get_access_log_store,
    get_current_user,
    get_qr_code_store,
    require_owner,
    require_resident,
)
from domain.errors import DomainError
from domain.models.access_log import AccessLogRead
from domain.models.qr_code import QrCode, QrCodeRead
from domain.models.user import User
from domain.services.qr_issuance import StatusFilter, filter_by_status, issue_qr_code
from infrastructure.qr.image import make_qr_png
from infrastructure.stores import AccessLogStore, QrCodeStore

router = APIRouter()


class IssueQrRequest(BaseModel):
    visitor_name: str = Field(max_length=120)
    note: str = Field(default="", max_length=500)


def _can_manage(user: User, qr: QrCode) -> bool:
    if qr.user_id == user.id:
        return True
    return user.is_owner and qr.residential_id == user.residential_id


async def _get_managed(qr_codes: QrCodeStore, user: User, qr_code_id: str) -> QrCode:
    qr = await qr_codes.get(qr_code_id)
    if not qr or not _can_manage(user, qr):
        raise HTTPException(status_code=404, detail="QR code not found")
    return qr


@router.post("/", response_model=QrCodeRead, status_code=201)
async def issue_qr(
    req: IssueQrRequest,
    resident: User = Depends(require_resident),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
):
    try:
        return await issue_qr_code(resident, req.visitor_name, req.note, qr_codes)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/mine", response_model=List[QrCodeRead])
async def list_my_qr_codes(
    status: StatusFilter = Query(default="all"),
    user: User = Depends(get_current_user),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
):
    """Codes issued by the caller, newest first"""
    return filter_by_status(await qr_codes.list_by_user(user.id), status)


@router.get("/", response_model=List[QrCodeRead])
async def list_residential_qr_codes(
    status: StatusFilter = Query(default="all"),
    owner: User = Depends(require_owner),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
):
    """All codes of the owner's residential, newest first"""
    return filter_by_status(await qr_codes.list_by_residential(owner.residential_id), status)


@router.get("/{qr_code_id}", response_model=QrCodeRead)
async def get_qr_code(
    qr_code_id: str,
    user: User = Depends(get_current_user),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
):
    return await _get_managed(qr_codes, user, qr_code_id)


@router.get("/{qr_code_id}/image.png")
async def get_qr_image(
    qr_code_id: str,
    user: User = Depends(get_current_user),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
):
    """PNG of the payload, for sharing with the visitor"""
    qr = await _get_managed(qr_codes, user, qr_code_id)
    return Response(content=make_qr_png(qr.qr_data), media_type="image/png")


@router.get("/{qr_code_id}/access-logs", response_model=List[AccessLogRead])
async def list_qr_access_logs(
    qr_code_id: str,
    user: User = Depends(get_current_user),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
    access_logs: AccessLogStore = Depends(get_access_log_store),
):
    """Scans of one code, newest first"""
    await _get_managed(qr_codes, user, qr_code_id)
    return await access_logs.list_by_qr_code(qr_code_id)


@router.delete("/{qr_code_id}", status_code=204)
async def delete_qr_code(
    qr_code_id: str,
    user: User = Depends(get_current_user),
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
):
    await _get_managed(qr_codes, user, qr_code_id)
    await qr_codes.delete(qr_code_id)
    return None
