"""Residential Store - created once at owner registration, never modified"""

from __future__ import annotations

from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain.models.residential import Residential, ResidentialCreate


class ResidentialStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: ResidentialCreate) -> Residential:
        residential = Residential.model_validate(data)
        self.session.add(residential)
        await self.session.commit()
        await self.session.refresh(residential)
        return residential

    async def get(self, residential_id: str) -> Optional[Residential]:
        res = await self.session.execute(select(Residential).where(Residential.id == residential_id))
        return res.scalar_one_or_none()
