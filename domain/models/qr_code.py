"""QrCode model - time-boxed visitor access record issued by a resident"""
from typing import Optional
from datetime import datetime
from uuid import uuid4
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from domain.clock import utcnow


class QrCodeBase(SQLModel):
    user_id: str = Field(index=True)
    residential_id: str = Field(index=True)

    # Opaque payload embedded in the QR image; unique by convention only
    qr_data: str = Field(index=True)

    note: str = Field(default="")
    visitor_name: Optional[str] = None
    expires_at: datetime = Field(sa_type=DateTime(timezone=True))
    is_active: bool = Field(default=True)

    # Denormalized from the issuing resident
    apartment: str = Field(default="")
    resident_name: str = Field(default="")


class QrCode(QrCodeBase, table=True):
    __tablename__ = "qr_codes"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class QrCodeCreate(QrCodeBase):
    pass


class QrCodeRead(QrCodeBase):
    id: str
    created_at: datetime


class QrCodeUpdate(SQLModel):
    note: Optional[str] = None
    visitor_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None
