"""User model - owners and residents share one record shape"""
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from domain.clock import utcnow

ROLE_OWNER = "owner"
ROLE_RESIDENT = "resident"


class UserBase(SQLModel):
    email: str = Field(index=True)
    role: str = Field(index=True)  # owner | resident
    residential_id: str = Field(index=True)
    apartment: str = Field(default="")  # "101", "B-205"
    name: str
    active: bool = Field(default=True)


class User(UserBase, table=True):
    __tablename__ = "users"

    # Same id as the identity-provider account
    id: str = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    @property
    def is_owner(self) -> bool:
        return self.role == ROLE_OWNER

    @property
    def is_resident(self) -> bool:
        return self.role == ROLE_RESIDENT


class UserCreate(UserBase):
    id: str


class UserRead(UserBase):
    id: str
    created_at: datetime


class UserUpdate(SQLModel):
    name: Optional[str] = None
    apartment: Optional[str] = None
    active: Optional[bool] = None
