"""API v1 routers"""
from . import (
    auth,
    residentials,
    invitations,
    residents,
    qr_codes,
    qr_validate,
    access_logs,
    dashboard,
)

__all__ = [
    "auth",
    "residentials",
    "invitations",
    "residents",
    "qr_codes",
    "qr_validate",
    "access_logs",
    "dashboard",
]
