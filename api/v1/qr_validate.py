"""QR validation endpoint used by gate scanners.

POST runs the full check and always writes one access log entry.
GET is a pass/fail form for simple gates; it only writes to the access log
when `audit_lightweight_validation` is enabled.
No authentication: possession of a stored payload is what grants entry.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from api.deps import get_access_validator
from config import settings as app_settings
from domain.services.access_validation import AccessValidator

router = APIRouter()
logger = structlog.get_logger()

MESSAGE_REQUIRED = "QR data is required"
MESSAGE_INTERNAL = "Internal server error"


async def _read_qr_data(request: Request) -> Any:
    """qrData from a JSON object body. Raises ValueError if the body is not JSON."""
    body = await request.json()
    return body.get("qrData") if isinstance(body, dict) else None


@router.post("/validate")
async def validate_qr(
    request: Request,
    validator: AccessValidator = Depends(get_access_validator),
):
    """Body: {"qrData": "<scanned payload>"}"""
    try:
        qr_data = await _read_qr_data(request)
        if not qr_data:
            return JSONResponse({"valid": False, "message": MESSAGE_REQUIRED}, status_code=400)

        decision = await validator.validate(qr_data)
    except Exception:
        logger.exception("qr_validation_error")
        return JSONResponse({"valid": False, "message": MESSAGE_INTERNAL}, status_code=500)

    if not decision.valid:
        return JSONResponse({"valid": False, "message": decision.message}, status_code=decision.status_code)

    return JSONResponse(
        {"valid": True, "message": decision.message, "data": decision.projection()},
        status_code=200,
    )


@router.get("/validate")
async def check_qr(
    data: Optional[str] = Query(default=None),
    validator: AccessValidator = Depends(get_access_validator),
):
    if not data:
        return JSONResponse({"valid": False, "message": MESSAGE_REQUIRED}, status_code=400)

    try:
        if app_settings.audit_lightweight_validation:
            decision = await validator.validate(data)
        else:
            decision = await validator.check(data)
    except Exception:
        logger.exception("qr_check_error")
        return JSONResponse({"valid": False, "message": MESSAGE_INTERNAL}, status_code=500)

    if decision.status_code == 400:
        return JSONResponse({"valid": False, "message": decision.message}, status_code=400)
    if not decision.valid:
        return JSONResponse({"valid": False}, status_code=403)
    return JSONResponse({"valid": True}, status_code=200)
