"""Tests for property image uploads."""

import pytest
from unittest.mock import MagicMock

from ktmrental.services import supabase_client
from ktmrental.services.image_upload import (
    ImageFile,
    generate_object_path,
    upload_property_images,
)
from ktmrental.utils.errors import UploadError, ValidationError


@pytest.fixture
def storage_client(monkeypatch):
    client = MagicMock()
    bucket = client.storage.from_.return_value
    bucket.get_public_url.side_effect = lambda path: f"https://test.supabase.co/storage/v1/object/public/property-images/{path}"
    monkeypatch.setattr(supabase_client, "_client", client)
    return client


def _images(count):
    return [ImageFile(f"photo_{i}.JPG", b"\xff\xd8\xff" + bytes([i])) for i in range(count)]


@pytest.mark.unit
def test_generate_object_path():
    path = generate_object_path("U1", "Living Room.PNG")

    owner, name = path.split("/")
    assert owner == "U1"
    assert name.endswith(".png")
    assert len(name) == 26 + len(".png")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_returns_urls_in_order(storage_client):
    urls = await upload_property_images(_images(3), "U1")

    bucket = storage_client.storage.from_.return_value
    storage_client.storage.from_.assert_called_once_with("property-images")
    assert bucket.upload.call_count == 3
    uploaded_paths = [c.kwargs["path"] for c in bucket.upload.call_args_list]
    assert urls == [f"https://test.supabase.co/storage/v1/object/public/property-images/{p}" for p in uploaded_paths]
    assert bucket.upload.call_args_list[0].kwargs["file_options"] == {"content-type": "image/jpeg"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_uses_configured_bucket(storage_client, monkeypatch):
    monkeypatch.setenv("PROPERTY_IMAGES_BUCKET", "rooms-media")

    await upload_property_images(_images(1), "U1")

    storage_client.storage.from_.assert_called_once_with("rooms-media")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_at_most_ten_images(storage_client):
    assert len(await upload_property_images(_images(10), "U1")) == 10

    with pytest.raises(ValidationError):
        await upload_property_images(_images(11), "U1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_nothing(storage_client):
    assert await upload_property_images([], "U1") == []
    storage_client.storage.from_.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_failure_stops_batch(storage_client):
    bucket = storage_client.storage.from_.return_value
    bucket.upload.side_effect = [None, RuntimeError("Payload too large")]

    with pytest.raises(UploadError, match="photo_1.JPG"):
        await upload_property_images(_images(3), "U1")

    assert bucket.upload.call_count == 2
