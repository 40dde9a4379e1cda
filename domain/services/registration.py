"""Owner sign-up: identity, residential and owner user, in that order.

No compensation: a failure after the identity is registered leaves an
identity without a residential or user record.
"""

from __future__ import annotations

from typing import Tuple

import structlog

from domain.models.residential import Residential, ResidentialCreate
from domain.models.user import User, UserCreate, ROLE_OWNER
from domain.services.passwords import check_new_password, require_text
from infrastructure.identity import IdentityProvider
from infrastructure.stores import ResidentialStore, UserStore

logger = structlog.get_logger()


async def register_owner(
    *,
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    residential_name: str,
    address: str,
    identity: IdentityProvider,
    residentials: ResidentialStore,
    users: UserStore,
) -> Tuple[User, Residential]:
    name = require_text(name, "Name")
    residential_name = require_text(residential_name, "Residential name")
    check_new_password(password, confirm_password)

    email = email.strip().lower()
    owner_id = await identity.register(email, password)

    residential = await residentials.create(
        ResidentialCreate(
            id=owner_id,
            owner_id=owner_id,
            name=residential_name,
            address=address.strip(),
        )
    )

    user = await users.create(
        UserCreate(
            id=owner_id,
            email=email,
            role=ROLE_OWNER,
            residential_id=residential.id,
            apartment="",
            name=name,
            active=True,
        )
    )

    logger.info("owner_registered", user_id=user.id, residential_id=residential.id)
    return user, residential
