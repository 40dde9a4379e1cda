"""Tests for the demo seed script."""

import pytest

from config import settings
from infrastructure.database import connection
from seed_data import seed_database


@pytest.fixture
def seed_db_url(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}")
    monkeypatch.setattr(connection, "_engine", None)
    monkeypatch.setattr(connection, "_async_session_maker", None)
    return settings.database_url


@pytest.mark.asyncio
async def test_seed_disposes_engine_when_already_seeded(seed_db_url, capsys):
    await seed_database()
    assert connection._engine is None
    assert "Seeding complete" in capsys.readouterr().out

    await seed_database()

    assert "already seeded" in capsys.readouterr().out
    assert connection._engine is None
