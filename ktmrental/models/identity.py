"""Identity models - the authenticated principal and login events."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Role(str, Enum):
    """Caller role."""
    ADMIN = "admin"
    USER = "user"


class Identity(BaseModel):
    """Authenticated caller as supplied by the identity provider."""
    user_id: str = Field(..., description="External identity provider user ID")
    email: Optional[str] = Field(None, description="Primary e-mail address")
    role: Role = Field(default=Role.USER, description="Derived role")
    username: Optional[str] = Field(None, description="Display name")
    phone_number: Optional[str] = Field(None, description="Primary phone number")

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class UserLogin(BaseModel):
    """Row of the user_logins table."""
    id: Optional[str] = None
    user_id: str = Field(..., description="External identity provider user ID")
    email: str = Field(default="", description="E-mail at login time")
    username: Optional[str] = None
    phone_number: Optional[str] = None
    logged_in_date: str = Field(..., description="ISO timestamp of the login")
