"""Tests for the login event log."""

import pytest
from freezegun import freeze_time

from ktmrental.services import login_store
from ktmrental.utils.errors import PersistenceError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_user_login(fake_db):
    with freeze_time("2024-12-09 12:00:00"):
        login = await login_store.store_user_login("U1", "owner@example.com", username="", phone_number=None)

    assert login.user_id == "U1"
    assert login.username is None
    assert login.logged_in_date == "2024-12-09T12:00:00+00:00"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_history_newest_first(fake_db):
    for day in ("2024-12-07", "2024-12-09", "2024-12-08"):
        with freeze_time(f"{day} 10:00:00"):
            await login_store.store_user_login("U1", "owner@example.com")
    with freeze_time("2024-12-09 11:00:00"):
        await login_store.store_user_login("U2", "other@example.com")

    history = await login_store.get_user_login_history("U1")

    assert [h.logged_in_date[:10] for h in history] == ["2024-12-09", "2024-12-08", "2024-12-07"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_has_login_today(fake_db):
    with freeze_time("2024-12-08 22:00:00"):
        await login_store.store_user_login("U1", "owner@example.com")

    with freeze_time("2024-12-09 09:00:00"):
        assert await login_store.has_login_today("U1") is False
        await login_store.store_user_login("U1", "owner@example.com")
        assert await login_store.has_login_today("U1") is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_has_login_today_failure(fake_db):
    fake_db.failures.add("select")

    with pytest.raises(PersistenceError):
        await login_store.has_login_today("U1")
