"""
Image intake unit tests
"""
import base64
import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from styleswap.errors import ValidationError
from styleswap.intake import (
    decode_data_uri,
    detect_media_type,
    encode_image,
    read_upload,
    split_data_uri,
    to_data_uri,
)


def _upload(data: bytes, content_type: str | None) -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else None
    return UploadFile(file=io.BytesIO(data), filename="photo.bin", headers=headers)


@pytest.mark.unit
class TestDataUris:
    """Tests for building and splitting data URIs"""

    def test_to_data_uri(self):
        assert to_data_uri("image/png", b"hello") == "data:image/png;base64,aGVsbG8="

    def test_split_data_uri(self):
        media_type, payload = split_data_uri("data:image/jpeg;base64,QUJD")
        assert media_type == "image/jpeg"
        assert payload == "QUJD"

    def test_decode_data_uri(self):
        assert decode_data_uri("data:image/webp;base64,QUJD") == ("image/webp", b"ABC")

    @pytest.mark.parametrize("bad", ["", "QUJD", "data:image/png,QUJD", "data:image/png;base64,", "http://x/y.png"])
    def test_split_rejects_malformed(self, bad):
        with pytest.raises(ValidationError):
            split_data_uri(bad)

    def test_decode_rejects_bad_base64(self):
        with pytest.raises(ValidationError):
            decode_data_uri("data:image/png;base64,@@@")


@pytest.mark.unit
class TestEncodeImage:
    """Tests for UploadedImage construction"""

    def test_encode_image_fields(self, png_bytes):
        image = encode_image(png_bytes, "image/png", "body")

        assert image.media_type == "image/png"
        assert image.encoded_data.startswith("data:image/png;base64,")
        assert base64.b64decode(image.encoded_data.split(",", 1)[1]) == png_bytes
        assert image.preview_reference.startswith("/preview/body/")
        assert len(image.preview_reference.rsplit("/", 1)[1]) == 8

    def test_preview_reference_changes_on_replacement(self, png_bytes):
        first = encode_image(png_bytes, "image/png", "outfit")
        second = encode_image(png_bytes, "image/png", "outfit")
        assert first.preview_reference != second.preview_reference

    def test_invalid_slot(self, png_bytes):
        with pytest.raises(ValidationError):
            encode_image(png_bytes, "image/png", "shoes")


@pytest.mark.unit
@pytest.mark.asyncio
class TestReadUpload:
    """Tests for reading FastAPI uploads"""

    async def test_uses_declared_image_type(self, png_bytes):
        image = await read_upload(_upload(png_bytes, "image/webp"), "body")
        assert image.media_type == "image/webp"

    async def test_sniffs_type_when_not_declared(self, png_bytes):
        image = await read_upload(_upload(png_bytes, "application/octet-stream"), "body")
        assert image.media_type == "image/png"

    async def test_rejects_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            await read_upload(_upload(b"", "image/png"), "body")

    async def test_rejects_non_image(self):
        with pytest.raises(ValidationError):
            await read_upload(_upload(b"just some text", "text/plain"), "outfit")


@pytest.mark.unit
def test_detect_media_type(png_bytes):
    assert detect_media_type(png_bytes) == "image/png"
