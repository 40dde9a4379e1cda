"""Common API dependencies: stores, identity provider, current user, role checks."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from domain.models.user import User
from domain.services.access_validation import AccessValidator
from infrastructure.database import get_session
from infrastructure.identity import IdentityError, LocalIdentityProvider
from infrastructure.stores import (
    AccessLogStore,
    InvitationStore,
    QrCodeStore,
    ResidentialStore,
    UserStore,
)

bearer_scheme = HTTPBearer()


def get_qr_code_store(session: AsyncSession = Depends(get_session)) -> QrCodeStore:
    return QrCodeStore(session)


def get_invitation_store(session: AsyncSession = Depends(get_session)) -> InvitationStore:
    return InvitationStore(session)


def get_access_log_store(session: AsyncSession = Depends(get_session)) -> AccessLogStore:
    return AccessLogStore(session)


def get_user_store(session: AsyncSession = Depends(get_session)) -> UserStore:
    return UserStore(session)


def get_residential_store(session: AsyncSession = Depends(get_session)) -> ResidentialStore:
    return ResidentialStore(session)


def get_identity_provider(session: AsyncSession = Depends(get_session)) -> LocalIdentityProvider:
    return LocalIdentityProvider(session)


def get_access_validator(
    qr_codes: QrCodeStore = Depends(get_qr_code_store),
    access_logs: AccessLogStore = Depends(get_access_log_store),
) -> AccessValidator:
    return AccessValidator(qr_codes, access_logs)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
    users: UserStore = Depends(get_user_store),
) -> User:
    """Resolve the bearer session to the application user."""
    try:
        identity_id = await identity.verify(credentials.credentials)
    except IdentityError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.code)

    user = await users.get(identity_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def require_owner(user: User = Depends(get_current_user)) -> User:
    if not user.is_owner:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner access required",
        )
    return user


def require_resident(user: User = Depends(get_current_user)) -> User:
    if not user.is_resident:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Resident access required",
        )
    return user
