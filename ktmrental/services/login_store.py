"""Login event log (user_logins table)."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from ktmrental.config import AppConfig
from ktmrental.models.identity import UserLogin
from ktmrental.services.supabase_client import SupabaseClient
from ktmrental.utils.errors import PersistenceError

TABLE = AppConfig.LOGINS_TABLE


def _utc_day_bounds(now: Optional[datetime] = None) -> tuple[str, str]:
    now = now or datetime.now(timezone.utc)
    start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.isoformat(), end.isoformat()


async def store_user_login(
    user_id: str,
    email: str,
    username: Optional[str] = None,
    phone_number: Optional[str] = None,
) -> UserLogin:
    """Insert a login event stamped with the current time."""
    login = {
        "user_id": user_id,
        "email": email or "",
        "username": username or None,
        "phone_number": phone_number or None,
        "logged_in_date": datetime.now(timezone.utc).isoformat(),
    }

    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).insert(login).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to store user login: {e}")

    if not result.data:
        raise PersistenceError("Failed to store user login: no data returned")
    return UserLogin.model_validate(result.data[0])


async def get_user_login_history(user_id: str) -> list[UserLogin]:
    """Get the login history of a user, newest first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .eq("user_id", user_id)
                .order("logged_in_date", desc=True)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to fetch user login history: {e}")
    return [UserLogin.model_validate(row) for row in result.data or []]


async def has_login_today(user_id: str) -> bool:
    """Check whether a login was already recorded for the current UTC day."""
    start_of_day, end_of_day = _utc_day_bounds()

    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("id")
                .eq("user_id", user_id)
                .gte("logged_in_date", start_of_day)
                .lt("logged_in_date", end_of_day)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to check today's login: {e}")
    return bool(result.data)
