"""Property verification workflow.

Owners submit properties into the ``toverify`` table with status ``pending``.
Administrators approve or reject them; an approval also publishes the
property as a listing in the ``rooms`` table. Approved and rejected are
terminal: repeating the same decision is a no-op, a different decision is
refused with InvalidTransitionError.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from pydantic import ValidationError as ModelValidationError

from ktmrental.models.identity import Role
from ktmrental.models.property import (
    Decision,
    PendingProperty,
    PropertyCreate,
    PropertyStatus,
    next_status,
    target_status,
)
from ktmrental.services import listing_store, submission_store
from ktmrental.utils.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ktmrental.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id, timed

logger = get_structured_logger(__name__)


def _parse_decision(decision: Union[Decision, str]) -> Decision:
    try:
        return Decision(decision)
    except ValueError:
        raise ValidationError(f"Unknown decision: {decision!r} (expected 'approve' or 'reject')")


def _parse_status(status: Union[PropertyStatus, str]) -> PropertyStatus:
    try:
        return PropertyStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown status: {status!r}")


@timed("verification.submit")
async def submit(property_attrs: Union[PropertyCreate, dict], owner_id: str) -> PendingProperty:
    """
    Submit a property for verification.

    Returns the stored submission with status pending and available set.
    Raises ValidationError for missing or invalid fields and
    PersistenceError if the store write fails.
    """
    if not owner_id:
        raise ValidationError("owner_id is required")

    try:
        attrs = PropertyCreate.model_validate(property_attrs)
    except ModelValidationError as e:
        raise ValidationError(f"Invalid property data: {e}")

    row = {
        **attrs.model_dump(include=set(PropertyCreate.model_fields)),
        "owner_id": owner_id,
        "available": True,
        "status": PropertyStatus.PENDING.value,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }

    submission = PendingProperty.model_validate(await submission_store.insert_submission(row))
    logger.info(
        "Property submitted for verification",
        submission_id=submission.id,
        owner_id=mask_user_id(owner_id),
    )
    return submission


async def list_pending() -> list[PendingProperty]:
    """All submissions awaiting review, newest first. Admin context only."""
    return await list_by_status(PropertyStatus.PENDING)


async def list_by_status(status: Union[PropertyStatus, str]) -> list[PendingProperty]:
    """Submissions with the given status, newest first."""
    status = _parse_status(status)
    rows = await submission_store.get_submissions_by_status(status.value)
    return [PendingProperty.model_validate(row) for row in rows]


async def list_by_owner(owner_id: str) -> list[PendingProperty]:
    """Every submission of an owner regardless of status, newest first."""
    rows = await submission_store.get_submissions_by_owner(owner_id)
    return [PendingProperty.model_validate(row) for row in rows]


async def get_submission(submission_id: str) -> PendingProperty:
    row = await submission_store.get_submission(submission_id)
    if row is None:
        raise NotFoundError(f"Property not found: {submission_id}")
    return PendingProperty.model_validate(row)


@timed("verification.decide")
async def decide(
    submission_id: str,
    decision: Union[Decision, str],
    caller_role: Union[Role, str],
) -> PendingProperty:
    """
    Approve or reject a pending submission.

    Only the status column changes. An approval first publishes the property
    to the rooms table and then marks the submission approved, so an
    approved submission always has a listing. If the status write fails the
    new listing is withdrawn and the error is raised with the submission
    still pending.
    """
    if caller_role != Role.ADMIN:
        logger.warning(
            "Non-admin attempted to decide a submission",
            submission_id=submission_id,
            caller_role=str(getattr(caller_role, "value", caller_role)),
        )
        raise AuthorizationError("Only administrators can approve or reject properties")

    decision = _parse_decision(decision)
    submission = await get_submission(submission_id)

    if submission.status == target_status(decision):
        logger.info(
            "Decision already applied",
            submission_id=submission_id,
            status=submission.status.value,
        )
        return submission

    new_status = next_status(submission.status, decision)

    if new_status is not PropertyStatus.APPROVED:
        updated = await _set_status(submission_id, new_status)
        logger.info("Property rejected", submission_id=submission_id)
        return updated

    listing = await listing_store.create_listing(submission.to_listing_data(), submission.owner_id)
    try:
        updated = await _set_status(submission_id, new_status)
    except (PersistenceError, NotFoundError):
        await _withdraw_listing(listing.id, submission_id)
        raise

    logger.info(
        "Property approved and published",
        submission_id=submission_id,
        listing_id=listing.id,
    )
    return updated


async def _set_status(submission_id: str, status: PropertyStatus) -> PendingProperty:
    row = await submission_store.update_submission_status(submission_id, status.value)
    if row is None:
        raise NotFoundError(f"Property not found: {submission_id}")
    return PendingProperty.model_validate(row)


async def _withdraw_listing(listing_id: str, submission_id: str) -> None:
    """Delete a listing published for an approval whose status write failed."""
    try:
        await listing_store.delete_listing(listing_id)
    except PersistenceError as e:
        logger.error(
            "Failed to withdraw listing after status update failure; listing left orphaned",
            submission_id=submission_id,
            listing_id=listing_id,
            error=mask_sensitive_data(str(e)),
        )
        return
    logger.warning(
        "Status update failed, withdrew published listing",
        submission_id=submission_id,
        listing_id=listing_id,
    )


async def remove(submission_id: str, caller_id: Optional[str] = None) -> None:
    """
    Delete a submission.

    With caller_id only the owner may delete it. Without one (administrator
    path) the row is deleted unconditionally.
    """
    if caller_id is not None:
        submission = await get_submission(submission_id)
        if submission.owner_id != caller_id:
            raise AuthorizationError("Unauthorized: You can only delete your own properties")

    await submission_store.delete_submission(submission_id)
    logger.info(
        "Property submission deleted",
        submission_id=submission_id,
        by_owner=caller_id is not None,
    )


def count_by_status(submissions: Iterable[PendingProperty]) -> dict[str, int]:
    """Per-status totals for an owner's dashboard."""
    counts = Counter(s.status for s in submissions)
    return {status.value: counts.get(status, 0) for status in PropertyStatus}
