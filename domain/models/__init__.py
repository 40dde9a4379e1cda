"""Domain models for Portero Residencial"""
from .user import User
from .residential import Residential
from .invitation import Invitation
from .qr_code import QrCode
from .access_log import AccessLog
from .identity import Identity, RevokedSession

__all__ = [
    "User",
    "Residential",
    "Invitation",
    "QrCode",
    "AccessLog",
    "Identity",
    "RevokedSession",
]
