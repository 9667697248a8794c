import asyncio
import io

import pytest
from PIL import Image

from app.services import image_store


def test_get_extension():
    assert image_store.get_extension("photo.JPG") == "jpg"
    assert image_store.get_extension("archive.tar.gz") == "gz"
    assert image_store.get_extension("photo") == ""
    assert image_store.get_extension(None) == ""


def test_build_keys_are_scoped_to_diner():
    key, thumb_key = image_store.build_keys("DINER1", "png")
    assert key.startswith("diner/DINER1/images/")
    assert key.endswith(".png")
    assert thumb_key.startswith("diner/DINER1/thumbnails/")
    assert thumb_key.endswith(".jpg")


def test_public_url_empty_key():
    assert image_store.public_url("") == ""


def test_public_url_uses_bucket_host():
    url = image_store.public_url("diner/D/images/x.jpg")
    assert url.endswith("/diner/D/images/x.jpg")
    assert url.startswith("https://")


def test_thumbnail_fits_configured_size(jpeg_bytes):
    thumb = image_store.make_thumbnail(jpeg_bytes)
    img = Image.open(io.BytesIO(thumb))
    width, height = image_store._THUMB_SIZE
    assert img.width <= width
    assert img.height <= height


def test_thumbnail_from_png_with_alpha():
    img = Image.new("RGBA", (400, 400), color=(10, 20, 30, 128))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    thumb = image_store.make_thumbnail(buf.getvalue())
    assert Image.open(io.BytesIO(thumb)).format == "JPEG"


def test_upload_writes_original_and_thumbnail(jpeg_bytes, fake_s3):
    key, thumb_key = asyncio.run(image_store.upload_diner_image(jpeg_bytes, "DINER1", "jpg"))
    assert fake_s3.objects[key] == jpeg_bytes
    assert thumb_key in fake_s3.objects
    assert len(fake_s3.objects[thumb_key]) < len(jpeg_bytes)


def test_upload_rejects_non_image(fake_s3):
    with pytest.raises(image_store.StorageError):
        asyncio.run(image_store.upload_diner_image(b"not an image", "DINER1", "jpg"))
    assert fake_s3.objects == {}


def test_upload_wraps_client_errors(jpeg_bytes, fake_s3):
    fake_s3.fail_puts = True
    with pytest.raises(image_store.StorageError):
        asyncio.run(image_store.upload_diner_image(jpeg_bytes, "DINER1", "jpg"))


def test_remove_objects_skips_empty_keys(jpeg_bytes, fake_s3):
    key, thumb_key = asyncio.run(image_store.upload_diner_image(jpeg_bytes, "DINER1", "jpg"))
    asyncio.run(image_store.remove_objects(key, "", thumb_key))
    assert fake_s3.objects == {}


def test_remove_objects_wraps_client_errors(fake_s3):
    fake_s3.fail_deletes = True
    with pytest.raises(image_store.StorageError):
        asyncio.run(image_store.remove_objects("diner/D/images/x.jpg"))
