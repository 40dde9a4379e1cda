"""Audit Log - append-only record of QR validation attempts.

Entries are never updated or deleted.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain.clock import as_utc
from domain.models.access_log import AccessLog, AccessLogCreate


class AccessLogStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, data: AccessLogCreate) -> AccessLog:
        entry = AccessLog.model_validate(data)
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)
        return entry

    async def list_by_residential(
        self,
        residential_id: str,
        is_valid: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[AccessLog]:
        query = select(AccessLog).where(AccessLog.residential_id == residential_id)
        if is_valid is not None:
            query = query.where(AccessLog.is_valid == is_valid)

        res = await self.session.execute(query)
        entries = sorted(res.scalars().all(), key=lambda e: as_utc(e.scanned_at), reverse=True)
        return entries[:limit] if limit else entries

    async def list_by_qr_code(self, qr_code_id: str) -> List[AccessLog]:
        res = await self.session.execute(select(AccessLog).where(AccessLog.qr_code_id == qr_code_id))
        return sorted(res.scalars().all(), key=lambda e: as_utc(e.scanned_at), reverse=True)
