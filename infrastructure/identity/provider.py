"""Identity provider - email/password accounts and bearer sessions.

The application consumes this through the contract
register / authenticate / sign_out / verify / subscribe and keeps its own
User records separately (User.id == identity id). Error codes are surfaced
to clients as-is, e.g. "auth/email-already-in-use".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Protocol
from uuid import uuid4

import bcrypt
import jwt
import structlog
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from config import settings
from domain.clock import utcnow
from domain.models.identity import Identity, RevokedSession

logger = structlog.get_logger()

EMAIL_IN_USE = "auth/email-already-in-use"
WEAK_PASSWORD = "auth/weak-password"
INVALID_CREDENTIAL = "auth/invalid-credential"
INVALID_TOKEN = "auth/invalid-token"

# bcrypt only looks at the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


class IdentityError(Exception):
    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class IdentityChange:
    event: str  # registered | signed_in | signed_out
    identity_id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class IdentitySession:
    identity_id: str
    access_token: str
    expires_at: datetime


IdentityListener = Callable[[IdentityChange], None]


class IdentityEvents:
    """Fan-out of identity changes to subscribers."""

    def __init__(self):
        self._listeners: List[IdentityListener] = []

    def subscribe(self, callback: IdentityListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(self, change: IdentityChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error("identity_listener_failed", event_type=change.event, error=str(e))


identity_events = IdentityEvents()


class IdentityProvider(Protocol):
    async def register(self, email: str, password: str) -> str: ...

    async def authenticate(self, email: str, password: str) -> IdentitySession: ...

    async def sign_out(self, token: str) -> None: ...

    async def verify(self, token: str) -> str: ...

    def subscribe(self, callback: IdentityListener) -> Callable[[], None]: ...


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode(), hashed.encode())


class LocalIdentityProvider:
    """Identity provider backed by the application database."""

    def __init__(self, session: AsyncSession, events: IdentityEvents = identity_events):
        self.session = session
        self.events = events

    async def _get_by_email(self, email: str) -> Optional[Identity]:
        res = await self.session.execute(select(Identity).where(Identity.email == email))
        return res.scalar_one_or_none()

    async def register(self, email: str, password: str) -> str:
        email = email.strip().lower()

        if len(password) < settings.min_password_length or len(password.encode()) > MAX_PASSWORD_BYTES:
            raise IdentityError(WEAK_PASSWORD)
        if await self._get_by_email(email):
            raise IdentityError(EMAIL_IN_USE)

        identity = Identity(email=email, password_hash=hash_password(password))
        self.session.add(identity)
        await self.session.commit()
        await self.session.refresh(identity)

        logger.info("identity_registered", identity_id=identity.id)
        self.events.emit(IdentityChange("registered", identity.id, email))
        return identity.id

    async def authenticate(self, email: str, password: str) -> IdentitySession:
        identity = await self._get_by_email(email.strip().lower())
        if not identity or not verify_password(password, identity.password_hash):
            raise IdentityError(INVALID_CREDENTIAL)

        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
        payload = {
            "sub": identity.id,
            "email": identity.email,
            "jti": uuid4().hex,
            "exp": expire,
            "type": "access",
        }
        token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

        self.events.emit(IdentityChange("signed_in", identity.id, identity.email))
        return IdentitySession(
            identity_id=identity.id,
            access_token=token,
            expires_at=expire,
        )

    def _decode(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except jwt.PyJWTError:
            raise IdentityError(INVALID_TOKEN)

        if payload.get("type") != "access" or not payload.get("sub") or not payload.get("jti"):
            raise IdentityError(INVALID_TOKEN)
        return payload

    async def verify(self, token: str) -> str:
        """Return the identity id behind a live session token."""
        payload = self._decode(token)
        revoked = await self.session.get(RevokedSession, payload["jti"])
        if revoked:
            raise IdentityError(INVALID_TOKEN)
        return payload["sub"]

    async def sign_out(self, token: str) -> None:
        payload = self._decode(token)
        if not await self.session.get(RevokedSession, payload["jti"]):
            self.session.add(RevokedSession(jti=payload["jti"], identity_id=payload["sub"], revoked_at=utcnow()))
            await self.session.commit()

        self.events.emit(IdentityChange("signed_out", payload["sub"], payload.get("email")))

    def subscribe(self, callback: IdentityListener) -> Callable[[], None]:
        return self.events.subscribe(callback)
