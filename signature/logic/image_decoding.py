# signature/logic/image_decoding.py
from __future__ import annotations

import base64
import binascii
from io import BytesIO
from typing import Union

from PIL import Image, UnidentifiedImageError

from ..exceptions.errors import ImageDecodeError, UnsupportedFormat
from ..models.signature_enums import ImageFormat
from ..models.signature_field import normalize_image_format

_PIL_FORMATS = {"PNG": ImageFormat.PNG, "JPEG": ImageFormat.JPEG}


def decode_image_payload(payload: Union[bytes, bytearray, str]) -> bytes:
    """
    Raw image bytes from a field's image payload.

    Bytes pass through unchanged; strings are either plain base64 or a
    ``data:image/...;base64,...`` URI whose prefix is stripped first.
    """
    if isinstance(payload, (bytes, bytearray)):
        if not payload:
            raise ImageDecodeError("image payload is empty")
        return bytes(payload)
    if not isinstance(payload, str):
        raise ImageDecodeError(f"unsupported image payload type {type(payload).__name__}")

    text = payload.strip()
    if text.startswith("data:"):
        header, sep, text = text.partition(",")
        if not sep:
            raise ImageDecodeError("data URI without payload")
        if not header.endswith(";base64"):
            raise ImageDecodeError("only base64 data URIs are supported")
    text = "".join(text.split())
    if not text:
        raise ImageDecodeError("image payload is empty")

    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError(f"invalid base64 image payload: {exc}") from exc


def load_signature_image(image_bytes: bytes, image_format: Union[str, ImageFormat]) -> Image.Image:
    """
    Decode *image_bytes* with Pillow after checking the declared format.

    PNG comes back as RGBA so transparency survives, JPEG as RGB.
    :raises UnsupportedFormat: declared or actual format is not PNG/JPEG
    :raises ImageDecodeError: Pillow cannot read the bytes
    """
    fmt_name = image_format.value if isinstance(image_format, ImageFormat) else image_format
    declared = normalize_image_format(fmt_name)
    if declared not in {f.value for f in ImageFormat}:
        raise UnsupportedFormat(f"unsupported image format {image_format!r}")

    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except Image.DecompressionBombError as exc:
        raise ImageDecodeError(f"{declared} image too large: {exc}") from exc
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise ImageDecodeError(f"cannot decode {declared} image: {exc}") from exc

    actual = _PIL_FORMATS.get(img.format or "")
    if actual is None:
        raise UnsupportedFormat(f"image data is {img.format}, not PNG/JPEG")

    if actual is ImageFormat.PNG:
        return img.convert("RGBA")
    return img.convert("RGB")
