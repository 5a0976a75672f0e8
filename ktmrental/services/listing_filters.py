"""In-memory search, bedroom bucketing and sorting of fetched listings."""

from enum import Enum
from typing import Iterable, Optional, Union

from ktmrental.models.property import Listing
from ktmrental.utils.errors import ValidationError


class BedroomFilter(str, Enum):
    ALL = "all"
    STUDIO = "studio"
    ONE = "1"
    TWO = "2"
    THREE_PLUS = "3+"


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    BEDROOMS_DESC = "bedrooms-desc"


def _parse(enum_cls, value, label: str):
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Unknown {label}: {value!r} (expected one of {allowed})")


def search(listings: Iterable[Listing], term: Optional[str]) -> list[Listing]:
    """Keep listings whose title, location or description contains term (case-insensitive)."""
    listings = list(listings)
    needle = (term or "").strip().lower()
    if not needle:
        return listings
    return [
        listing for listing in listings
        if needle in listing.title.lower()
        or needle in listing.location.lower()
        or needle in (listing.description or "").lower()
    ]


def filter_by_bedrooms(
    listings: Iterable[Listing],
    bucket: Union[BedroomFilter, str, None],
) -> list[Listing]:
    """Studio means 0 bedrooms, 1 and 2 are exact, 3+ is three or more."""
    listings = list(listings)
    bucket = _parse(BedroomFilter, bucket, "bedroom filter")

    if bucket is None or bucket is BedroomFilter.ALL:
        return listings
    if bucket is BedroomFilter.STUDIO:
        return [l for l in listings if l.bedrooms == 0]
    if bucket is BedroomFilter.THREE_PLUS:
        return [l for l in listings if l.bedrooms >= 3]
    count = int(bucket.value)
    return [l for l in listings if l.bedrooms == count]


def sort_listings(
    listings: Iterable[Listing],
    order: Union[SortOrder, str, None] = SortOrder.NEWEST,
) -> list[Listing]:
    order = _parse(SortOrder, order, "sort order") or SortOrder.NEWEST

    if order is SortOrder.OLDEST:
        return sorted(listings, key=lambda l: l.created_at or "")
    if order is SortOrder.PRICE_ASC:
        return sorted(listings, key=lambda l: l.price)
    if order is SortOrder.PRICE_DESC:
        return sorted(listings, key=lambda l: l.price, reverse=True)
    if order is SortOrder.BEDROOMS_DESC:
        return sorted(listings, key=lambda l: l.bedrooms, reverse=True)
    return sorted(listings, key=lambda l: l.created_at or "", reverse=True)


def apply_filters(
    listings: Iterable[Listing],
    term: Optional[str] = None,
    bedrooms: Union[BedroomFilter, str, None] = None,
    order: Union[SortOrder, str, None] = None,
) -> list[Listing]:
    """Search, then bedroom bucket, then sort. Without an order the input order is kept."""
    result = search(listings, term)
    result = filter_by_bedrooms(result, bedrooms)
    if order is None or order == "":
        return result
    return sort_listings(result, order)
