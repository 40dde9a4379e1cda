"""Gate-side validation of scanned visitor QR payloads.

Checks run in a fixed order and the first failing check decides:

    malformed -> not found -> inactive -> expired -> granted

Every outcome of `validate` appends exactly one access log entry. Expiry is
lazy: a record is only flipped to inactive when a scan finds it past its
expires_at. Once inactive, a record is never reactivated here.

Concurrent scans of the same payload are not coordinated; both may be
granted, and the expiry flip is last-write-wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import structlog

from domain.clock import as_utc, isoformat_utc, utcnow
from domain.models.access_log import AccessLogCreate, UNKNOWN
from domain.models.qr_code import QrCode, QrCodeUpdate
from domain.services import qr_codec
from infrastructure.stores import AccessLogStore, QrCodeStore

logger = structlog.get_logger()

# Reasons written to the access log
REASON_INVALID_FORMAT = "Invalid QR format"
REASON_NOT_FOUND = "QR code not found in database"
REASON_INACTIVE = "QR code is inactive"
REASON_EXPIRED = "QR code expired"

# Messages returned to the scanner
MESSAGE_GRANTED = "Access granted"
MESSAGE_INVALID_FORMAT = "Invalid QR format"
MESSAGE_NOT_FOUND = "QR code not found"
MESSAGE_INACTIVE = "QR code is inactive"
MESSAGE_EXPIRED = "QR code has expired"


@dataclass(frozen=True)
class ValidationDecision:
    valid: bool
    status_code: int
    message: str
    reason: Optional[str] = None
    qr_code: Optional[QrCode] = None

    def projection(self) -> Optional[Dict[str, Any]]:
        """What the gate gets to see about a granted code."""
        if not self.valid or self.qr_code is None:
            return None
        return {
            "residentName": self.qr_code.resident_name,
            "apartment": self.qr_code.apartment,
            "note": self.qr_code.note,
            "expiresAt": isoformat_utc(self.qr_code.expires_at),
        }


def is_expired(qr: QrCode, now: datetime) -> bool:
    return as_utc(qr.expires_at) <= now


class AccessValidator:
    def __init__(self, qr_codes: QrCodeStore, access_logs: AccessLogStore):
        self.qr_codes = qr_codes
        self.access_logs = access_logs

    async def _log(
        self,
        qr_code_id: str,
        user_id: str,
        residential_id: str,
        is_valid: bool,
        reason: Optional[str] = None,
    ) -> None:
        await self.access_logs.append(
            AccessLogCreate(
                qr_code_id=qr_code_id,
                user_id=user_id,
                residential_id=residential_id,
                is_valid=is_valid,
                reason=reason,
            )
        )

    async def validate(self, payload: Any, now: Optional[datetime] = None) -> ValidationDecision:
        now = as_utc(now) if now else utcnow()

        parsed = qr_codec.decode(payload)
        if parsed is None:
            await self._log(UNKNOWN, UNKNOWN, UNKNOWN, False, REASON_INVALID_FORMAT)
            logger.info("qr_validation_denied", reason=REASON_INVALID_FORMAT)
            return ValidationDecision(False, 400, MESSAGE_INVALID_FORMAT, REASON_INVALID_FORMAT)

        qr = await self.qr_codes.get_by_payload(payload)
        if qr is None:
            await self._log(parsed.id or UNKNOWN, parsed.user_id or UNKNOWN, UNKNOWN, False, REASON_NOT_FOUND)
            logger.info("qr_validation_denied", reason=REASON_NOT_FOUND, payload_id=parsed.id)
            return ValidationDecision(False, 404, MESSAGE_NOT_FOUND, REASON_NOT_FOUND)

        if not qr.is_active:
            await self._log(qr.id, qr.user_id, qr.residential_id, False, REASON_INACTIVE)
            logger.info("qr_validation_denied", reason=REASON_INACTIVE, qr_code_id=qr.id)
            return ValidationDecision(False, 403, MESSAGE_INACTIVE, REASON_INACTIVE, qr)

        if is_expired(qr, now):
            qr = await self.qr_codes.update(qr.id, QrCodeUpdate(is_active=False)) or qr
            await self._log(qr.id, qr.user_id, qr.residential_id, False, REASON_EXPIRED)
            logger.info("qr_validation_denied", reason=REASON_EXPIRED, qr_code_id=qr.id)
            return ValidationDecision(False, 403, MESSAGE_EXPIRED, REASON_EXPIRED, qr)

        await self._log(qr.id, qr.user_id, qr.residential_id, True)
        logger.info("qr_validation_granted", qr_code_id=qr.id, residential_id=qr.residential_id)
        return ValidationDecision(True, 200, MESSAGE_GRANTED, None, qr)

    async def check(self, payload: Any, now: Optional[datetime] = None) -> ValidationDecision:
        """Pass/fail variant for simple gates: no access log, no expiry flip."""
        now = as_utc(now) if now else utcnow()

        if qr_codec.decode(payload) is None:
            return ValidationDecision(False, 400, MESSAGE_INVALID_FORMAT, REASON_INVALID_FORMAT)

        qr = await self.qr_codes.get_by_payload(payload)
        if qr is None:
            return ValidationDecision(False, 403, MESSAGE_NOT_FOUND, REASON_NOT_FOUND)
        if not qr.is_active:
            return ValidationDecision(False, 403, MESSAGE_INACTIVE, REASON_INACTIVE, qr)
        if is_expired(qr, now):
            return ValidationDecision(False, 403, MESSAGE_EXPIRED, REASON_EXPIRED, qr)

        return ValidationDecision(True, 200, MESSAGE_GRANTED, None, qr)
