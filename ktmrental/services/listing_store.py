"""Published listings (rooms table) operations."""

import re
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import ValidationError as ModelValidationError

from ktmrental.config import AppConfig
from ktmrental.models.property import Listing, ListingUpdate, PropertyCreate
from ktmrental.services.supabase_client import SupabaseClient
from ktmrental.utils.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ktmrental.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

TABLE = AppConfig.LISTINGS_TABLE

# LIKE wildcards and the escape character itself
_LIKE_SPECIAL = re.compile(r"([\\%_])")


def _contains_pattern(term: str) -> str:
    """ILIKE pattern matching term as a literal substring."""
    return "%" + _LIKE_SPECIAL.sub(r"\\\1", term) + "%"


def _quoted(value: str) -> str:
    """Double-quote a value for a PostgREST or() expression."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _to_listings(rows: Optional[list[dict]]) -> list[Listing]:
    return [Listing.model_validate(row) for row in rows or []]


async def create_listing(listing_data: Union[PropertyCreate, dict], owner_id: str) -> Listing:
    """Create a published listing owned by owner_id."""
    try:
        attrs = PropertyCreate.model_validate(listing_data)
    except ModelValidationError as e:
        raise ValidationError(f"Invalid listing data: {e}")

    row = {
        **attrs.model_dump(include=set(PropertyCreate.model_fields)),
        "owner_id": owner_id,
        "available": True,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }

    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).insert(row).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to create listing: {e}")

    if not result.data:
        raise PersistenceError("Failed to create listing: no data returned")

    listing = Listing.model_validate(result.data[0])
    logger.info(
        "Listing created",
        listing_id=listing.id,
        owner_id=mask_user_id(owner_id),
    )
    return listing


async def get_listings() -> list[Listing]:
    """Get all available listings, newest first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .eq("available", True)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to fetch rooms: {e}")
    return _to_listings(result.data)


async def get_listings_by_location(location: str) -> list[Listing]:
    """Get available listings whose location contains the given text."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .ilike("location", _contains_pattern(location.strip()))
                .eq("available", True)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to fetch rooms by location: {e}")
    return _to_listings(result.data)


async def get_listings_by_owner(owner_id: str) -> list[Listing]:
    """Get every listing of an owner, available or not, newest first."""
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
            raise PersistenceError(f"Failed to fetch user rooms: {e}")
    return _to_listings(result.data)


async def get_listing_by_id(listing_id: str) -> Optional[Listing]:
    """Get a listing by ID."""
    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).select("*").eq("id", listing_id).limit(1).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to fetch room: {e}")
    return Listing.model_validate(result.data[0]) if result.data else None


async def _require_owner(listing_id: str, caller_id: str) -> None:
    listing = await get_listing_by_id(listing_id)
    if listing is None:
        raise NotFoundError(f"Listing not found: {listing_id}")
    if listing.owner_id != caller_id:
        raise AuthorizationError("Unauthorized: You can only modify your own listings")


async def update_listing(
    listing_id: str,
    updates: Union[ListingUpdate, dict],
    caller_id: Optional[str] = None,
) -> Listing:
    """
    Apply a partial update to a listing.

    With caller_id only the owner may update. Fields not present in updates
    are left untouched.
    """
    try:
        changes = ListingUpdate.model_validate(updates).model_dump(exclude_unset=True)
    except ModelValidationError as e:
        raise ValidationError(f"Invalid listing update: {e}")

    if caller_id is not None:
        await _require_owner(listing_id, caller_id)

    if not changes:
        listing = await get_listing_by_id(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing not found: {listing_id}")
        return listing

    async with SupabaseClient() as client:
        try:
            result = client.table(TABLE).update(changes).eq("id", listing_id).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to update room: {e}")

    if not result.data:
        raise NotFoundError(f"Listing not found: {listing_id}")

    logger.info("Listing updated", listing_id=listing_id, fields=sorted(changes))
    return Listing.model_validate(result.data[0])


async def delete_listing(listing_id: str, caller_id: Optional[str] = None) -> None:
    """Delete a listing. With caller_id only the owner may delete."""
    if caller_id is not None:
        await _require_owner(listing_id, caller_id)

    async with SupabaseClient() as client:
        try:
            client.table(TABLE).delete().eq("id", listing_id).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to delete room: {e}")

    logger.info("Listing deleted", listing_id=listing_id, by_owner=caller_id is not None)


async def search_listings(search_term: str) -> list[Listing]:
    """Search available listings by title or location (case-insensitive substring)."""
    term = search_term.strip()
    if not term:
        return await get_listings()

    pattern = _quoted(_contains_pattern(term))
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .or_(f"title.ilike.{pattern},location.ilike.{pattern}")
                .eq("available", True)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to search rooms: {e}")
    return _to_listings(result.data)


async def filter_listings_by_price(min_price: float, max_price: float) -> list[Listing]:
    """Get available listings with min_price <= price <= max_price, cheapest first."""
    if min_price > max_price:
        raise ValidationError("min_price must not exceed max_price")

    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TABLE)
                .select("*")
                .gte("price", min_price)
                .lte("price", max_price)
                .eq("available", True)
                .order("price")
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to filter rooms by price: {e}")
    return _to_listings(result.data)
