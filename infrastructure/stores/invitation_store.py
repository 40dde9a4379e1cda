"""Invitation Store - pending/accepted invitations keyed by a random token"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain.clock import as_utc
from domain.models.invitation import Invitation, InvitationCreate, InvitationUpdate


class InvitationStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: InvitationCreate) -> Invitation:
        invitation = Invitation.model_validate(data)
        self.session.add(invitation)
        await self.session.commit()
        await self.session.refresh(invitation)
        return invitation

    async def get(self, invitation_id: str) -> Optional[Invitation]:
        res = await self.session.execute(select(Invitation).where(Invitation.id == invitation_id))
        return res.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        res = await self.session.execute(select(Invitation).where(Invitation.token == token).limit(1))
        return res.scalars().first()

    async def list_by_residential(self, residential_id: str) -> List[Invitation]:
        res = await self.session.execute(
            select(Invitation).where(Invitation.residential_id == residential_id)
        )
        # Sorted here, not in SQL (see qr_code_store)
        return sorted(res.scalars().all(), key=lambda inv: as_utc(inv.created_at), reverse=True)

    async def update(self, invitation_id: str, updates: InvitationUpdate) -> Optional[Invitation]:
        invitation = await self.get(invitation_id)
        if not invitation:
            return None

        for key, value in updates.model_dump(exclude_unset=True).items():
            setattr(invitation, key, value)

        self.session.add(invitation)
        await self.session.commit()
        await self.session.refresh(invitation)
        return invitation
