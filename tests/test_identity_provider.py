"""Tests for the local identity provider."""

from datetime import timedelta

import pytest
from structlog.testing import capture_logs

from infrastructure.identity import IdentityError, LocalIdentityProvider
from infrastructure.identity.provider import (
    EMAIL_IN_USE,
    INVALID_CREDENTIAL,
    INVALID_TOKEN,
    WEAK_PASSWORD,
    IdentityEvents,
)


@pytest.fixture
def events() -> IdentityEvents:
    return IdentityEvents()


@pytest.fixture
def provider(db_session, events) -> LocalIdentityProvider:
    return LocalIdentityProvider(db_session, events=events)


@pytest.mark.asyncio
async def test_register_authenticate_verify(provider):
    identity_id = await provider.register("Ana@Example.com", "secret123")

    session = await provider.authenticate("ana@example.com", "secret123")

    assert session.identity_id == identity_id
    assert await provider.verify(session.access_token) == identity_id


@pytest.mark.asyncio
async def test_register_rejects_duplicates_and_weak_passwords(provider):
    await provider.register("ana@example.com", "secret123")

    with pytest.raises(IdentityError) as exc:
        await provider.register("ANA@example.com", "secret123")
    assert exc.value.code == EMAIL_IN_USE

    with pytest.raises(IdentityError) as exc:
        await provider.register("bob@example.com", "123")
    assert exc.value.code == WEAK_PASSWORD


@pytest.mark.asyncio
async def test_authenticate_wrong_password(provider):
    await provider.register("ana@example.com", "secret123")

    with pytest.raises(IdentityError) as exc:
        await provider.authenticate("ana@example.com", "nope-nope")
    assert exc.value.code == INVALID_CREDENTIAL

    with pytest.raises(IdentityError) as exc:
        await provider.authenticate("nobody@example.com", "secret123")
    assert exc.value.code == INVALID_CREDENTIAL


@pytest.mark.asyncio
async def test_sign_out_revokes_only_that_session(provider):
    await provider.register("ana@example.com", "secret123")
    first = await provider.authenticate("ana@example.com", "secret123")
    second = await provider.authenticate("ana@example.com", "secret123")

    await provider.sign_out(first.access_token)

    with pytest.raises(IdentityError) as exc:
        await provider.verify(first.access_token)
    assert exc.value.code == INVALID_TOKEN
    assert await provider.verify(second.access_token) == first.identity_id

    # Signing out twice is harmless
    await provider.sign_out(first.access_token)


@pytest.mark.asyncio
async def test_subscribers_receive_changes(provider):
    seen = []
    unsubscribe = provider.subscribe(lambda change: seen.append(change.event))

    await provider.register("ana@example.com", "secret123")
    session = await provider.authenticate("ana@example.com", "secret123")
    await provider.sign_out(session.access_token)
    assert seen == ["registered", "signed_in", "signed_out"]

    unsubscribe()
    await provider.authenticate("ana@example.com", "secret123")
    assert seen == ["registered", "signed_in", "signed_out"]


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_others(provider):
    seen = []

    def broken(change):
        raise ValueError("boom")

    provider.subscribe(broken)
    provider.subscribe(lambda change: seen.append(change.identity_id))

    with capture_logs() as logs:
        identity_id = await provider.register("ana@example.com", "secret123")

    assert seen == [identity_id]
    failures = [log for log in logs if log["event"] == "identity_listener_failed"]
    assert len(failures) == 1
    assert failures[0]["event_type"] == "registered"
    assert failures[0]["error"] == "boom"


@pytest.mark.asyncio
async def test_passwords_over_72_bytes(provider):
    with pytest.raises(IdentityError) as exc:
        await provider.register("ana@example.com", "ñ" * 40)
    assert exc.value.code == WEAK_PASSWORD

    await provider.register("ana@example.com", "secret123")
    with pytest.raises(IdentityError) as exc:
        await provider.authenticate("ana@example.com", "a" * 100)
    assert exc.value.code == INVALID_CREDENTIAL


@pytest.mark.asyncio
async def test_session_expiry_is_aware_utc(provider):
    await provider.register("ana@example.com", "secret123")

    session = await provider.authenticate("ana@example.com", "secret123")

    assert session.expires_at.utcoffset() == timedelta(0)
