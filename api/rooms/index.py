"""Public room browsing."""

from ktmrental.services import listing_store
from ktmrental.services.listing_filters import apply_filters
from ktmrental.utils.http import (
    error_response,
    get_method,
    get_query,
    json_response,
    method_not_allowed,
    parse_float,
    run_async,
)
from ktmrental.utils.errors import ValidationError
from ktmrental.utils.logging import correlation_context, setup_logging

setup_logging()


async def _fetch(query: dict):
    min_price = parse_float(query.get("min_price"), "min_price")
    max_price = parse_float(query.get("max_price"), "max_price")

    if min_price is not None or max_price is not None:
        if min_price is None or max_price is None:
            raise ValidationError("min_price and max_price must be given together")
        return await listing_store.filter_listings_by_price(min_price, max_price)
    if query.get("location"):
        return await listing_store.get_listings_by_location(query["location"])
    return await listing_store.get_listings()


def handler(request):
    """
    GET available rooms.

    Query parameters: location, min_price and max_price narrow the fetch;
    search, bedrooms (all|studio|1|2|3+) and sort
    (newest|oldest|price-asc|price-desc|bedrooms-desc) are applied to the
    fetched set.
    """
    if get_method(request) != "GET":
        return method_not_allowed(["GET"])

    with correlation_context():
        try:
            query = get_query(request)
            listings = run_async(_fetch(query))
            listings = apply_filters(
                listings,
                term=query.get("search"),
                bedrooms=query.get("bedrooms"),
                order=query.get("sort"),
            )
            return json_response(200, {"data": listings, "count": len(listings)})
        except Exception as e:
            return error_response(e)
