"""Data access for the toverify table (properties awaiting review)."""

from typing import Optional
from ktmrental.config import AppConfig
from ktmrental.services.supabase_client import SupabaseClient
from ktmrental.utils.errors import PersistenceError

TABLE = AppConfig.PENDING_TABLE


async def insert_submission(submission_data: dict) -> dict:
    """Insert a submission row and return it as stored."""
    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).insert(submission_data).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to submit property: {e}")

    if result.data and len(result.data) > 0:
        return result.data[0]
    raise PersistenceError("Failed to submit property: no data returned")


async def get_submission(submission_id: str) -> Optional[dict]:
    """Get a submission by ID."""
    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).select("*").eq("id", submission_id).limit(1).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to get submission: {e}")
    return result.data[0] if result.data else None


async def get_submissions_by_status(status: str) -> list[dict]:
    """Get submissions with the given status, newest first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .eq("status", status)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to fetch properties by status: {e}")
    return result.data if result.data else []


async def get_submissions_by_owner(owner_id: str) -> list[dict]:
    """Get every submission of an owner, newest first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .eq("owner_id", owner_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to fetch user properties: {e}")
    return result.data if result.data else []


async def update_submission_status(submission_id: str, status: str) -> Optional[dict]:
    """Set the status column of a submission. Returns None if no row matched."""
    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).update({"status": status}).eq("id", submission_id).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to update property status: {e}")
    return result.data[0] if result.data else None


async def delete_submission(submission_id: str) -> None:
    """Delete a submission by ID."""
    async with SupabaseClient() as client:
        try:
            client.table(TABLE).delete().eq("id", submission_id).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to delete property: {e}")
