"""Property image upload to Supabase Storage."""

import mimetypes
import os
from typing import NamedTuple, Optional, Sequence
from ulid import ULID
from ktmrental.config import AppConfig
from ktmrental.services.supabase_client import SupabaseClient
from ktmrental.utils.errors import UploadError, ValidationError
from ktmrental.utils.logging import get_structured_logger, log_timing, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)


class ImageFile(NamedTuple):
    filename: str
    content: bytes
    content_type: Optional[str] = None


def generate_object_path(owner_id: str, filename: str) -> str:
    """Storage path for an upload: <owner_id>/<ulid><ext>."""
    _, ext = os.path.splitext(filename)
    return f"{owner_id}/{ULID()}{ext.lower()}"


async def upload_property_images(files: Sequence[ImageFile], owner_id: str) -> list[str]:
    """
    Upload images one after another and return their public URLs in order.

    At most AppConfig.MAX_PROPERTY_IMAGES files are accepted. The first
    failed transfer aborts the batch with UploadError.
    """
    if len(files) > AppConfig.MAX_PROPERTY_IMAGES:
        raise ValidationError(
            f"You can only upload up to {AppConfig.MAX_PROPERTY_IMAGES} images per property"
        )
    if not files:
        return []

    bucket_name = AppConfig.images_bucket()
    urls: list[str] = []

    with log_timing(
        "upload_property_images",
        logger=logger,
        image_count=len(files),
        owner_id=mask_user_id(owner_id),
    ):
        async with SupabaseClient() as client:
            bucket = client.storage.from_(bucket_name)
            for image in files:
                path = generate_object_path(owner_id, image.filename)
                content_type = (
                    image.content_type
                    or mimetypes.guess_type(image.filename)[0]
                    or "application/octet-stream"
                )
                try:
                    bucket.upload(
                        path=path,
                        file=image.content,
                        file_options={"content-type": content_type},
                    )
                    urls.append(bucket.get_public_url(path))
                except Exception as e:
                    logger.error(
                        "Image upload failed",
                        image_name=image.filename,
                        uploaded=len(urls),
                        error=mask_sensitive_data(str(e)),
                    )
                    raise UploadError(f"Failed to upload {image.filename}: {e}")

    return urls
