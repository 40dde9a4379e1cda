"""Identity provider"""
from .provider import (
    IdentityChange,
    IdentityError,
    IdentityEvents,
    IdentityProvider,
    IdentitySession,
    LocalIdentityProvider,
    identity_events,
)

__all__ = [
    "IdentityChange",
    "IdentityError",
    "IdentityEvents",
    "IdentityProvider",
    "IdentitySession",
    "LocalIdentityProvider",
    "identity_events",
]
