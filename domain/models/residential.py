"""Residential (complex) model"""
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from domain.clock import utcnow


class ResidentialBase(SQLModel):
    owner_id: str = Field(index=True)
    name: str
    address: str = Field(default="")


class Residential(ResidentialBase, table=True):
    __tablename__ = "residentials"

    # One residential per owner: id == owner_id at creation
    id: str = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class ResidentialCreate(ResidentialBase):
    id: str


class ResidentialRead(ResidentialBase):
    id: str
    created_at: datetime
