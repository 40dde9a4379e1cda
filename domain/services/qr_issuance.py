"""Issuing visitor QR codes and classifying them as active or expired."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Literal, Optional

import structlog

from config import settings
from domain.clock import as_utc, utcnow
from domain.errors import Forbidden, ValidationFailed
from domain.models.qr_code import QrCode, QrCodeCreate
from domain.models.user import User
from domain.services import qr_codec
from infrastructure.stores import QrCodeStore

logger = structlog.get_logger()

StatusFilter = Literal["all", "active", "expired"]


def is_currently_active(qr: QrCode, now: Optional[datetime] = None) -> bool:
    """Active and not yet past expiry. The stored flag may lag behind the clock."""
    now = as_utc(now) if now else utcnow()
    return bool(qr.is_active) and as_utc(qr.expires_at) > now


def filter_by_status(codes: Iterable[QrCode], status: StatusFilter, now: Optional[datetime] = None) -> List[QrCode]:
    now = as_utc(now) if now else utcnow()
    if status == "active":
        return [qr for qr in codes if is_currently_active(qr, now)]
    if status == "expired":
        return [qr for qr in codes if not is_currently_active(qr, now)]
    return list(codes)


async def issue_qr_code(
    resident: User,
    visitor_name: str,
    note: str,
    qr_codes: QrCodeStore,
    now: Optional[datetime] = None,
) -> QrCode:
    """Create a visitor QR valid for `qr_validity_hours` from now."""
    if not resident.is_resident:
        raise Forbidden("Only residents can issue visitor QR codes")

    visitor_name = (visitor_name or "").strip()
    if not visitor_name:
        raise ValidationFailed("Visitor name is required")

    now = as_utc(now) if now else utcnow()

    # Payload ids are random; retry on the rare collision with a stored payload
    qr_data: Optional[str] = None
    for _ in range(settings.qr_payload_max_attempts):
        candidate = qr_codec.encode(resident.id, resident.apartment, resident.name)
        if await qr_codes.get_by_payload(candidate) is None:
            qr_data = candidate
            break

    if qr_data is None:
        raise RuntimeError("Could not generate a unique QR payload")

    qr = await qr_codes.create(
        QrCodeCreate(
            user_id=resident.id,
            residential_id=resident.residential_id,
            qr_data=qr_data,
            note=(note or "").strip(),
            visitor_name=visitor_name,
            expires_at=now + timedelta(hours=settings.qr_validity_hours),
            is_active=True,
            apartment=resident.apartment,
            resident_name=resident.name,
        )
    )
    logger.info("qr_code_issued", qr_code_id=qr.id, user_id=resident.id, expires_at=qr.expires_at.isoformat())
    return qr
