"""Property submission models and the verification state machine."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ktmrental.config import AppConfig
from ktmrental.utils.errors import InvalidTransitionError


class PropertyStatus(str, Enum):
    """Review status of a submitted property."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not PropertyStatus.PENDING


class Decision(str, Enum):
    """Administrator decision on a pending submission."""
    APPROVE = "approve"
    REJECT = "reject"


_TRANSITIONS: dict[PropertyStatus, dict[Decision, PropertyStatus]] = {
    PropertyStatus.PENDING: {
        Decision.APPROVE: PropertyStatus.APPROVED,
        Decision.REJECT: PropertyStatus.REJECTED,
    },
}


def target_status(decision: Decision) -> PropertyStatus:
    """Status a decision leads to when applied to a pending submission."""
    return _TRANSITIONS[PropertyStatus.PENDING][decision]


def next_status(current: PropertyStatus, decision: Decision) -> PropertyStatus:
    """
    Apply a decision to a status.

    Only pending submissions can be decided; approved and rejected are terminal.
    Raises InvalidTransitionError for any transition out of a terminal state.
    """
    allowed = _TRANSITIONS.get(current, {})
    if decision not in allowed:
        raise InvalidTransitionError(
            f"Cannot {decision.value} a submission that is already {current.value}"
        )
    return allowed[decision]


class PropertyCreate(BaseModel):
    """Attributes supplied by an owner when submitting a property."""
    title: str = Field(..., min_length=1, description="Listing title")
    location: str = Field(..., min_length=1, description="Area or street address")
    description: Optional[str] = Field(None, description="Free-text description")
    price: float = Field(..., gt=0, description="Monthly rent")
    bedrooms: int = Field(..., ge=0, description="Number of bedrooms (0 for studio)")
    bathrooms: int = Field(..., ge=0, description="Number of bathrooms")
    amenities: Optional[list[str]] = Field(None, description="Amenity names")
    images: Optional[list[str]] = Field(
        None,
        max_length=AppConfig.MAX_PROPERTY_IMAGES,
        description="Image URLs in display order"
    )
    contact_phone: Optional[str] = Field(None, description="Owner contact phone")
    contact_email: Optional[str] = Field(None, description="Owner contact e-mail")

    @field_validator("title", "location", mode="before")
    @classmethod
    def strip_required_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("amenities")
    @classmethod
    def unique_amenities(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        return list(dict.fromkeys(a.strip() for a in value if a and a.strip()))


class PendingProperty(PropertyCreate):
    """Row of the toverify table."""
    id: str = Field(..., description="Submission ID")
    owner_id: str = Field(..., description="Submitting user ID")
    status: PropertyStatus = Field(default=PropertyStatus.PENDING, description="Review status")
    available: bool = Field(default=True, description="Rentable once approved")
    created_at: Optional[str] = None

    def to_listing_data(self) -> dict:
        """Attributes to publish in the rooms table."""
        return self.model_dump(include=set(PropertyCreate.model_fields))


class Listing(PropertyCreate):
    """Row of the rooms table (published listing)."""
    id: str = Field(..., description="Listing ID")
    owner_id: str = Field(..., description="Owner user ID")
    available: bool = Field(default=True, description="Visible in public browsing")
    created_at: Optional[str] = None


class ListingUpdate(BaseModel):
    """Partial update of a published listing."""
    title: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = Field(None, max_length=AppConfig.MAX_PROPERTY_IMAGES)
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    available: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def reject_null_required(cls, data):
        """Required listing columns can be left out of an update but not cleared."""
        if isinstance(data, dict):
            cleared = sorted(
                key for key in ("title", "location", "price", "bedrooms", "bathrooms", "available")
                if key in data and data[key] is None
            )
            if cleared:
                raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return data
