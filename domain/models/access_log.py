"""Access Log model - one row per QR validation attempt (append-only)"""
from typing import Optional
from datetime import datetime
from uuid import uuid4
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from domain.clock import utcnow

# Used when the scanned payload cannot be resolved to a record
UNKNOWN = "unknown"


class AccessLogBase(SQLModel):
    qr_code_id: str = Field(index=True)
    user_id: str
    residential_id: str = Field(index=True)
    is_valid: bool
    reason: Optional[str] = None  # None when access was granted


class AccessLog(AccessLogBase, table=True):
    __tablename__ = "access_logs"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    scanned_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class AccessLogCreate(AccessLogBase):
    pass


class AccessLogRead(AccessLogBase):
    id: str
    scanned_at: datetime
