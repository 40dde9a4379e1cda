"""Tests for the SQLModel-backed stores."""

from datetime import timedelta

import pytest

from domain.clock import as_utc, utcnow
from domain.models.access_log import AccessLogCreate
from domain.models.invitation import InvitationCreate, InvitationUpdate, INVITATION_ACCEPTED
from domain.models.qr_code import QrCode, QrCodeCreate, QrCodeUpdate
from domain.models.user import UserCreate, UserUpdate, ROLE_RESIDENT


def _qr_create(**overrides) -> QrCodeCreate:
    data = dict(
        user_id="resident-ana",
        residential_id="residential-1",
        qr_data='{"id":"1-abc"}',
        note="",
        visitor_name="Pedro",
        expires_at=utcnow() + timedelta(hours=4),
        apartment="101",
        resident_name="Ana",
    )
    data.update(overrides)
    return QrCodeCreate(**data)


@pytest.mark.asyncio
async def test_qr_store_create_assigns_id_and_created_at(qr_store):
    qr = await qr_store.create(_qr_create())

    assert qr.id
    assert qr.created_at is not None
    assert qr.is_active is True
    assert await qr_store.get(qr.id) is not None
    assert await qr_store.get("missing") is None


@pytest.mark.asyncio
async def test_qr_store_get_by_payload_exact_match(qr_store):
    qr = await qr_store.create(_qr_create(qr_data='{"id":"exact"}'))

    assert (await qr_store.get_by_payload('{"id":"exact"}')).id == qr.id
    assert await qr_store.get_by_payload('{"id": "exact"}') is None


@pytest.mark.asyncio
async def test_qr_store_lists_newest_first(db_session, qr_store):
    now = utcnow()
    for i, age in enumerate([3, 1, 2]):
        db_session.add(
            QrCode(
                id=f"qr-{age}",
                user_id="resident-ana",
                residential_id="residential-1",
                qr_data=f'{{"id":"{i}"}}',
                expires_at=now + timedelta(hours=4),
                created_at=now - timedelta(hours=age),
            )
        )
    await db_session.commit()

    by_user = await qr_store.list_by_user("resident-ana")
    by_residential = await qr_store.list_by_residential("residential-1")

    assert [qr.id for qr in by_user] == ["qr-1", "qr-2", "qr-3"]
    assert [qr.id for qr in by_residential] == ["qr-1", "qr-2", "qr-3"]
    assert await qr_store.list_by_user("someone-else") == []


@pytest.mark.asyncio
async def test_qr_store_partial_update(qr_store):
    qr = await qr_store.create(_qr_create(note="Cena"))

    updated = await qr_store.update(qr.id, QrCodeUpdate(is_active=False))

    assert updated.is_active is False
    assert updated.note == "Cena"
    assert updated.visitor_name == "Pedro"
    assert await qr_store.update("missing", QrCodeUpdate(is_active=False)) is None


@pytest.mark.asyncio
async def test_qr_store_delete(qr_store):
    qr = await qr_store.create(_qr_create())

    assert await qr_store.delete(qr.id) is True
    assert await qr_store.get(qr.id) is None
    assert await qr_store.delete(qr.id) is False


@pytest.mark.asyncio
async def test_invitation_store_by_token_and_update(invitation_store):
    invitation = await invitation_store.create(
        InvitationCreate(
            residential_id="residential-1",
            email="new@example.com",
            token="tok-123",
            expires_at=utcnow() + timedelta(days=7),
        )
    )

    assert invitation.status == "pending"
    assert (await invitation_store.get_by_token("tok-123")).id == invitation.id
    assert await invitation_store.get_by_token("nope") is None

    updated = await invitation_store.update(invitation.id, InvitationUpdate(status=INVITATION_ACCEPTED))
    assert updated.status == INVITATION_ACCEPTED
    assert updated.email == "new@example.com"

    listed = await invitation_store.list_by_residential("residential-1")
    assert [inv.id for inv in listed] == [invitation.id]


@pytest.mark.asyncio
async def test_access_log_filters(access_log_store):
    for is_valid, reason in [(True, None), (False, "QR code expired"), (False, "QR code is inactive")]:
        await access_log_store.append(
            AccessLogCreate(
                qr_code_id="qr-1",
                user_id="resident-ana",
                residential_id="residential-1",
                is_valid=is_valid,
                reason=reason,
            )
        )
    await access_log_store.append(
        AccessLogCreate(qr_code_id="unknown", user_id="unknown", residential_id="unknown", is_valid=False)
    )

    assert len(await access_log_store.list_by_residential("residential-1")) == 3
    assert len(await access_log_store.list_by_residential("residential-1", is_valid=False)) == 2
    assert len(await access_log_store.list_by_residential("residential-1", is_valid=True)) == 1
    assert len(await access_log_store.list_by_residential("residential-1", limit=2)) == 2
    assert len(await access_log_store.list_by_qr_code("qr-1")) == 3


@pytest.mark.asyncio
async def test_user_store_list_residents_excludes_owners(user_store, owner_user, resident_user):
    residents = await user_store.list_residents("residential-1")
    assert [u.id for u in residents] == [resident_user.id]

    assert (await user_store.get_by_email("owner@example.com")).id == owner_user.id


@pytest.mark.asyncio
async def test_user_store_update_active(user_store, resident_user):
    updated = await user_store.update(resident_user.id, UserUpdate(active=False))

    assert updated.active is False
    assert updated.apartment == "101"
    assert updated.role == ROLE_RESIDENT


@pytest.mark.asyncio
async def test_user_store_create_keeps_given_id(user_store):
    user = await user_store.create(
        UserCreate(
            id="identity-42",
            email="bob@example.com",
            role=ROLE_RESIDENT,
            residential_id="residential-1",
            apartment="202",
            name="Bob",
        )
    )
    assert user.id == "identity-42"
    assert user.active is True


@pytest.mark.asyncio
async def test_timestamps_round_trip_as_utc(db_session, qr_store, access_log_store):
    expires_at = utcnow() + timedelta(hours=4)
    qr = await qr_store.create(_qr_create(expires_at=expires_at))
    entry = await access_log_store.append(
        AccessLogCreate(qr_code_id=qr.id, user_id="resident-ana", residential_id="residential-1", is_valid=True)
    )

    db_session.expunge_all()
    stored = await qr_store.get(qr.id)

    assert as_utc(stored.expires_at) == expires_at
    assert as_utc(stored.created_at) <= utcnow()
    assert as_utc(entry.scanned_at) <= utcnow()
