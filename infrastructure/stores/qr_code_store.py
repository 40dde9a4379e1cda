"""Access Record Store - persistence for issued visitor QR codes.

List operations filter on at most two equality conditions and sort by
created_at (newest first) in Python, not in the database.
"""

from __future__ import annotations

from typing import List, Optional

import structlog
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain.clock import as_utc
from domain.models.qr_code import QrCode, QrCodeCreate, QrCodeUpdate

logger = structlog.get_logger()


def newest_first(codes: List[QrCode]) -> List[QrCode]:
    return sorted(codes, key=lambda qr: as_utc(qr.created_at), reverse=True)


class QrCodeStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: QrCodeCreate) -> QrCode:
        """Store a new record and return it with its assigned id."""
        qr = QrCode.model_validate(data)
        self.session.add(qr)
        await self.session.commit()
        await self.session.refresh(qr)
        logger.info("qr_code_created", qr_code_id=qr.id, user_id=qr.user_id, residential_id=qr.residential_id)
        return qr

    async def get(self, qr_code_id: str) -> Optional[QrCode]:
        res = await self.session.execute(select(QrCode).where(QrCode.id == qr_code_id))
        return res.scalar_one_or_none()

    async def get_by_payload(self, qr_data: str) -> Optional[QrCode]:
        """Exact payload match. Returns the first record if duplicates exist."""
        res = await self.session.execute(select(QrCode).where(QrCode.qr_data == qr_data).limit(1))
        return res.scalars().first()

    async def list_by_user(self, user_id: str) -> List[QrCode]:
        res = await self.session.execute(select(QrCode).where(QrCode.user_id == user_id))
        return newest_first(list(res.scalars().all()))

    async def list_by_residential(self, residential_id: str) -> List[QrCode]:
        res = await self.session.execute(select(QrCode).where(QrCode.residential_id == residential_id))
        return newest_first(list(res.scalars().all()))

    async def update(self, qr_code_id: str, updates: QrCodeUpdate) -> Optional[QrCode]:
        """Merge the fields set on `updates`. Returns None if the record is gone."""
        qr = await self.get(qr_code_id)
        if not qr:
            return None

        update_data = updates.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(qr, key, value)

        self.session.add(qr)
        await self.session.commit()
        await self.session.refresh(qr)
        return qr

    async def delete(self, qr_code_id: str) -> bool:
        qr = await self.get(qr_code_id)
        if not qr:
            return False

        await self.session.delete(qr)
        await self.session.commit()
        logger.info("qr_code_deleted", qr_code_id=qr_code_id)
        return True
