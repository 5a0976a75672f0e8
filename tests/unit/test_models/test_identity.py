"""Tests for Identity and UserLogin models."""

import pytest
from pydantic import ValidationError
from ktmrental.models.identity import Identity, Role, UserLogin


@pytest.mark.unit
def test_identity_defaults_to_user_role():
    identity = Identity(user_id="U1", email="owner@example.com")

    assert identity.role == Role.USER
    assert identity.is_admin is False


@pytest.mark.unit
def test_identity_admin():
    identity = Identity(user_id="U1", role="admin")
    assert identity.is_admin is True


@pytest.mark.unit
def test_identity_requires_user_id():
    with pytest.raises(ValidationError):
        Identity(email="owner@example.com")


@pytest.mark.unit
def test_user_login_from_row():
    login = UserLogin.model_validate({
        "id": "login_1",
        "user_id": "U1",
        "email": "owner@example.com",
        "username": None,
        "phone_number": None,
        "logged_in_date": "2024-12-09T12:00:00+00:00",
    })

    assert login.user_id == "U1"
    assert login.logged_in_date.startswith("2024-12-09")
