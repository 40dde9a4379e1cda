"""Stores over the async SQLModel session"""
from .qr_code_store import QrCodeStore
from .invitation_store import InvitationStore
from .access_log_store import AccessLogStore
from .user_store import UserStore
from .residential_store import ResidentialStore

__all__ = [
    "QrCodeStore",
    "InvitationStore",
    "AccessLogStore",
    "UserStore",
    "ResidentialStore",
]
