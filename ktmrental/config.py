"""Application configuration read from environment variables."""

import os
from typing import Optional


class AppConfig:
    """Runtime settings for the rental backend.

    Values are read from the environment on every call so that serverless
    cold starts and tests both see the current environment.
    """

    PENDING_TABLE = "toverify"
    LISTINGS_TABLE = "rooms"
    LOGINS_TABLE = "user_logins"

    MAX_PROPERTY_IMAGES = 10

    @staticmethod
    def supabase_url() -> Optional[str]:
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_key() -> Optional[str]:
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    @staticmethod
    def images_bucket() -> str:
        return os.environ.get("PROPERTY_IMAGES_BUCKET", "property-images")

    @staticmethod
    def admin_emails() -> frozenset[str]:
        """Bootstrap administrator e-mails from ADMIN_EMAILS (comma separated).

        Empty unless explicitly configured for the deployment.
        """
        raw = os.environ.get("ADMIN_EMAILS", "")
        return parse_email_list(raw)


def parse_email_list(raw: str) -> frozenset[str]:
    """Parse a comma separated e-mail list into a normalized set."""
    return frozenset(
        email.strip().lower()
        for email in raw.split(",")
        if email.strip()
    )
