"""Turn user-selected files into data URIs the model client can send."""

import base64
import binascii
import io
import uuid

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from styleswap.config import VALID_SLOTS
from styleswap.errors import ValidationError
from styleswap.models import UploadedImage


def to_data_uri(media_type: str, raw: bytes) -> str:
    return f"data:{media_type};base64,{base64.b64encode(raw).decode('ascii')}"


def split_data_uri(uri: str) -> tuple[str, str]:
    """Split ``data:<type>;base64,<payload>`` into (media type, base64 payload)."""
    header, sep, payload = uri.partition(";base64,")
    if not sep or not header.startswith("data:") or not payload:
        raise ValidationError("Image data is not a base64 data URI")
    return header[len("data:"):], payload


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    media_type, payload = split_data_uri(uri)
    try:
        return media_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValidationError(f"Image data is not valid base64: {e}") from e


def detect_media_type(raw: bytes) -> str:
    """Identify the image format from its header bytes. Pixels are not decoded."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
    except UnidentifiedImageError as e:
        raise ValidationError("Selected file is not a recognised image") from e
    media_type = Image.MIME.get(fmt or "")
    if media_type is None:
        raise ValidationError(f"Unsupported image format: {fmt}")
    return media_type


def encode_image(raw: bytes, media_type: str, slot: str) -> UploadedImage:
    if slot not in VALID_SLOTS:
        raise ValidationError(f"Invalid slot: {slot}. Must be one of {VALID_SLOTS}")
    return UploadedImage(
        encoded_data=to_data_uri(media_type, raw),
        media_type=media_type,
        preview_reference=f"/preview/{slot}/{uuid.uuid4().hex[:8]}",
    )


async def read_upload(file: UploadFile, slot: str) -> UploadedImage:
    raw = await file.read()
    if not raw:
        raise ValidationError("Selected file is empty")

    # Trust the browser's type when it names an image, otherwise sniff it
    content_type = file.content_type or ""
    if content_type.startswith("image/"):
        media_type = content_type
    else:
        media_type = detect_media_type(raw)

    return encode_image(raw, media_type, slot)
