"""User Store - application users (owners and residents)"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain.clock import as_utc
from domain.models.user import User, UserCreate, UserUpdate, ROLE_RESIDENT


class UserStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: UserCreate) -> User:
        user = User.model_validate(data)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def get(self, user_id: str) -> Optional[User]:
        res = await self.session.execute(select(User).where(User.id == user_id))
        return res.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        res = await self.session.execute(select(User).where(User.email == email).limit(1))
        return res.scalars().first()

    async def list_residents(self, residential_id: str) -> List[User]:
        res = await self.session.execute(
            select(User).where(
                User.residential_id == residential_id,
                User.role == ROLE_RESIDENT,
            )
        )
        return sorted(res.scalars().all(), key=lambda u: as_utc(u.created_at), reverse=True)

    async def update(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        user = await self.get(user_id)
        if not user:
            return None

        for key, value in updates.model_dump(exclude_unset=True).items():
            setattr(user, key, value)

        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user
