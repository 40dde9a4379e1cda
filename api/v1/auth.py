"""Auth API - owner sign-up, login/logout and the current user"""
from datetime import datetime
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr, Field

from api.deps import (
    bearer_scheme,
    get_current_user,
    get_identity_provider,
    get_residential_store,
    get_user_store,
)
from domain.errors import DomainError
from domain.models.residential import ResidentialRead
from domain.models.user import User, UserRead
from domain.services.registration import register_owner
from infrastructure.identity import IdentityError, LocalIdentityProvider
from infrastructure.identity.provider import INVALID_CREDENTIAL
from infrastructure.stores import ResidentialStore, UserStore

router = APIRouter()
logger = structlog.get_logger()


class RegisterOwnerRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    residential_name: str = Field(min_length=1)
    address: str = ""
    password: str
    confirm_password: str


class RegisterOwnerResponse(BaseModel):
    user: UserRead
    residential: ResidentialRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: Optional[UserRead] = None  # None if sign-up never created the app user


@router.post("/register", response_model=RegisterOwnerResponse, status_code=201)
async def register(
    req: RegisterOwnerRequest,
    identity: LocalIdentityProvider = Depends(get_identity_provider),
    residentials: ResidentialStore = Depends(get_residential_store),
    users: UserStore = Depends(get_user_store),
):
    """Register an owner together with their residential"""
    try:
        user, residential = await register_owner(
            name=req.name,
            email=req.email,
            password=req.password,
            confirm_password=req.confirm_password,
            residential_name=req.residential_name,
            address=req.address,
            identity=identity,
            residentials=residentials,
            users=users,
        )
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except IdentityError as e:
        logger.warning("owner_registration_failed", error=e.code)
        raise HTTPException(status_code=400, detail=e.code)

    return RegisterOwnerResponse(
        user=UserRead.model_validate(user),
        residential=ResidentialRead.model_validate(residential),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    identity: LocalIdentityProvider = Depends(get_identity_provider),
    users: UserStore = Depends(get_user_store),
):
    try:
        session = await identity.authenticate(req.email, req.password)
    except IdentityError as e:
        status_code = 401 if e.code == INVALID_CREDENTIAL else 400
        raise HTTPException(status_code=status_code, detail=e.code)

    user = await users.get(session.identity_id)
    return LoginResponse(
        access_token=session.access_token,
        expires_at=session.expires_at,
        user=UserRead.model_validate(user) if user else None,
    )


@router.post("/logout", status_code=204)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
):
    try:
        await identity.sign_out(credentials.credentials)
    except IdentityError as e:
        raise HTTPException(status_code=401, detail=e.code)
    return None


@router.get("/me", response_model=UserRead)
async def me(user: User = Depends(get_current_user)):
    return user
