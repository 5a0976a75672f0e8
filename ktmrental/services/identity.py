"""Identity resolution - map identity provider claims to an Identity with a role."""

from typing import Any, Iterable, Optional
from ktmrental.config import AppConfig
from ktmrental.models.identity import Identity, Role
from ktmrental.services import login_store
from ktmrental.utils.errors import PersistenceError
from ktmrental.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)


def derive_role(
    metadata_role: Optional[str],
    email: Optional[str],
    admin_emails: Iterable[str],
) -> Role:
    """
    Derive the caller role.

    Admin when the provider metadata says so, or when the e-mail is in the
    configured bootstrap allow-list (compared case-insensitively).
    """
    if isinstance(metadata_role, str) and metadata_role.strip().lower() == Role.ADMIN.value:
        return Role.ADMIN

    if email:
        allowed = {e.strip().lower() for e in admin_emails}
        if email.strip().lower() in allowed:
            return Role.ADMIN

    return Role.USER


def _first(values: Any) -> Optional[str]:
    """Provider claims may carry a single value or a list of addresses."""
    if isinstance(values, list):
        for value in values:
            if isinstance(value, dict):
                value = value.get("email_address") or value.get("phone_number")
            if value:
                return str(value)
        return None
    return str(values) if values else None


def resolve_identity(
    claims: Optional[dict],
    admin_emails: Optional[Iterable[str]] = None,
) -> Optional[Identity]:
    """
    Build the caller identity from session claims.

    Returns None when unauthenticated. Claims are trusted as supplied by the
    identity provider.
    """
    if not claims or not isinstance(claims, dict):
        return None

    user_id = claims.get("user_id") or claims.get("sub")
    if not user_id:
        return None

    if admin_emails is None:
        admin_emails = AppConfig.admin_emails()

    email = _first(claims.get("email") or claims.get("email_addresses"))
    metadata = claims.get("public_metadata") or {}
    metadata_role = metadata.get("role") if isinstance(metadata, dict) else None

    username = claims.get("username")
    if not username:
        full_name = f"{claims.get('first_name') or ''} {claims.get('last_name') or ''}".strip()
        username = full_name or None

    return Identity(
        user_id=str(user_id),
        email=email,
        role=derive_role(metadata_role, email, admin_emails),
        username=username,
        phone_number=_first(claims.get("phone_number") or claims.get("phone_numbers")),
    )


async def record_login(identity: Identity) -> bool:
    """
    Record the first login of the current UTC day.

    Returns True when a row was written. The check and the insert are two
    separate calls, so concurrent first logins may both be recorded.
    Failures are logged and reported as False.
    """
    try:
        if await login_store.has_login_today(identity.user_id):
            logger.debug(
                "Login already recorded today",
                user_id=mask_user_id(identity.user_id),
            )
            return False

        await login_store.store_user_login(
            user_id=identity.user_id,
            email=identity.email or "",
            username=identity.username,
            phone_number=identity.phone_number,
        )
    except PersistenceError as e:
        logger.warning(
            "Failed to record user login (non-fatal)",
            user_id=mask_user_id(identity.user_id),
            error=mask_sensitive_data(str(e)),
        )
        return False

    logger.info(
        "User login recorded",
        user_id=mask_user_id(identity.user_id),
        email=mask_sensitive_data(identity.email),
    )
    return True
