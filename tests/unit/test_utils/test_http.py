"""Tests for the shared request handler helpers."""

import json
import logging
import pytest

from ktmrental.utils.errors import NotFoundError, PersistenceError
from ktmrental.utils.http import error_response, status_code_for


@pytest.mark.unit
@pytest.mark.parametrize("error,expected", [
    (NotFoundError("missing"), 404),
    (PersistenceError("down"), 502),
    (RuntimeError("boom"), 500),
])
def test_status_code_for(error, expected):
    assert status_code_for(error) == expected


@pytest.mark.unit
def test_error_response_hides_unexpected_errors():
    response = error_response(RuntimeError("stack details"))

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Internal server error"}


@pytest.mark.unit
def test_server_error_log_masks_contact_details(caplog):
    error = PersistenceError(
        'Failed to submit property: Failing row contains (Room A, +977 9800000000, owner@example.com)'
    )

    with caplog.at_level(logging.ERROR, logger="ktmrental.utils.http"):
        response = error_response(error)

    assert response["statusCode"] == 502
    record = caplog.records[-1]
    assert "owner@example.com" not in record.error
    assert "9800000000" not in record.error
    assert "[REDACTED_PHONE]" in record.error
