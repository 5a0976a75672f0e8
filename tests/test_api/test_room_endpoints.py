"""Tests for public room browsing and owner room management."""

import pytest

from api.rooms.index import handler as rooms_handler
from api.rooms.manage import handler as manage_handler
from tests.utils.assertions import assert_error_response, assert_valid_response
from tests.utils.factories import create_listing_row
from tests.utils.helpers import create_vercel_request, response_json


@pytest.fixture
def seeded_rooms(fake_db):
    fake_db.tables["rooms"] = [
        create_listing_row(owner_id="user_owner_01", id="r1", title="Studio flat", location="Thamel",
                           description="Compact", bedrooms=0, price=9000,
                           created_at="2024-01-01T00:00:00+00:00"),
        create_listing_row(owner_id="user_owner_01", id="r2", title="Room A", location="Patan",
                           description="Bright", bedrooms=1, price=15000,
                           created_at="2024-02-01T00:00:00+00:00"),
        create_listing_row(owner_id="user_other_02", id="r3", title="Family house", location="Patan",
                           description="Garden", bedrooms=3, price=20000,
                           created_at="2024-03-01T00:00:00+00:00"),
        create_listing_row(owner_id="user_other_02", id="r4", title="Villa", location="Budhanilkantha",
                           description="Pool", bedrooms=4, price=25000,
                           created_at="2024-04-01T00:00:00+00:00"),
        create_listing_row(owner_id="user_other_02", id="r5", title="Let out", location="Patan",
                           description="Taken", bedrooms=1, price=16000, available=False,
                           created_at="2024-05-01T00:00:00+00:00"),
    ]
    return fake_db


def _ids(response):
    return [room["id"] for room in response_json(response)["data"]]


@pytest.mark.unit
def test_browse_available_rooms(seeded_rooms):
    response = rooms_handler(create_vercel_request("GET"))

    assert_valid_response(response)
    assert _ids(response) == ["r4", "r3", "r2", "r1"]
    assert response_json(response)["count"] == 4


@pytest.mark.unit
def test_browse_by_price_range(seeded_rooms):
    response = rooms_handler(create_vercel_request("GET", query={"min_price": "10000", "max_price": "20000"}))

    assert _ids(response) == ["r2", "r3"]


@pytest.mark.unit
def test_browse_price_range_needs_both_bounds(seeded_rooms):
    assert_error_response(rooms_handler(create_vercel_request("GET", query={"min_price": "10000"})), 400)
    assert_error_response(rooms_handler(create_vercel_request("GET", query={"min_price": "cheap", "max_price": "1"})), 400)


@pytest.mark.unit
def test_browse_by_location_with_bedrooms_and_sort(seeded_rooms):
    response = rooms_handler(create_vercel_request(
        "GET", query={"location": "patan", "bedrooms": "3+", "sort": "price-desc"}
    ))

    assert _ids(response) == ["r3"]


@pytest.mark.unit
def test_browse_search_and_sort(seeded_rooms):
    response = rooms_handler(create_vercel_request("GET", query={"search": "a", "sort": "price-asc"}))

    assert _ids(response) == ["r1", "r2", "r3", "r4"]


@pytest.mark.unit
def test_browse_invalid_sort(seeded_rooms):
    assert_error_response(rooms_handler(create_vercel_request("GET", query={"sort": "random"})), 400)


@pytest.mark.unit
def test_owner_hides_room(seeded_rooms, user_claims):
    response = manage_handler(create_vercel_request(
        "PATCH", query={"id": "r2"}, body={"available": False}, auth=user_claims
    ))

    assert_valid_response(response)
    assert response_json(response)["data"]["available"] is False
    assert "r2" not in _ids(rooms_handler(create_vercel_request("GET")))


@pytest.mark.unit
def test_non_owner_cannot_edit(seeded_rooms, user_claims):
    response = manage_handler(create_vercel_request(
        "PATCH", query={"id": "r3"}, body={"price": 1000}, auth=user_claims
    ))

    assert_error_response(response, 403)


@pytest.mark.unit
def test_owner_cannot_clear_price(seeded_rooms, user_claims):
    response = manage_handler(create_vercel_request(
        "PATCH", query={"id": "r2"}, body={"price": None}, auth=user_claims
    ))

    assert_error_response(response, 400)
    stored = next(row for row in seeded_rooms.rows("rooms") if row["id"] == "r2")
    assert stored["price"] == 15000


@pytest.mark.unit
def test_owner_and_admin_delete(seeded_rooms, user_claims, admin_claims):
    assert_error_response(
        manage_handler(create_vercel_request("DELETE", query={"id": "r3"}, auth=user_claims)), 403
    )
    assert_valid_response(manage_handler(create_vercel_request("DELETE", query={"id": "r2"}, auth=user_claims)))
    assert_valid_response(manage_handler(create_vercel_request("DELETE", query={"id": "r3"}, auth=admin_claims)))

    assert {row["id"] for row in seeded_rooms.rows("rooms")} == {"r1", "r4", "r5"}


@pytest.mark.unit
def test_manage_missing_room(seeded_rooms, user_claims):
    response = manage_handler(create_vercel_request("DELETE", query={"id": "nope"}, auth=user_claims))

    assert_error_response(response, 404)
