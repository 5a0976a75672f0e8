"""Upload property images before submitting the property."""

import base64
import binascii

from ktmrental.services.image_upload import ImageFile, upload_property_images
from ktmrental.utils.errors import ValidationError
from ktmrental.utils.http import (
    error_response,
    get_method,
    json_response,
    method_not_allowed,
    parse_json_body,
    require_identity,
    run_async,
)
from ktmrental.utils.logging import correlation_context, setup_logging

setup_logging()


def _decode_images(items) -> list[ImageFile]:
    if not isinstance(items, list):
        raise ValidationError("images must be a list")

    files = []
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("filename") or not item.get("content_base64"):
            raise ValidationError(f"images[{index}] needs filename and content_base64")
        try:
            content = base64.b64decode(item["content_base64"], validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError(f"images[{index}] is not valid base64")
        files.append(ImageFile(item["filename"], content, item.get("content_type")))
    return files


def handler(request):
    """POST {"images": [{"filename", "content_base64", "content_type"?}]} -> {"urls": [...]}."""
    if get_method(request) != "POST":
        return method_not_allowed(["POST"])

    with correlation_context():
        try:
            identity = require_identity(request)
            files = _decode_images(parse_json_body(request).get("images", []))
            urls = run_async(upload_property_images(files, identity.user_id))
            return json_response(201, {"urls": urls})
        except Exception as e:
            return error_response(e)
