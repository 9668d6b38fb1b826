# signature/models/signature_enums.py
from __future__ import annotations
from enum import Enum


class ImageFormat(str, Enum):
    """Raster formats that can be embedded into a PDF page."""
    PNG = "png"
    JPEG = "jpeg"


class SkipReason(str, Enum):
    """Why a field was left out of an embedding pass."""
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    OUT_OF_RANGE_PAGE = "OutOfRangePage"
    IMAGE_DECODE_ERROR = "ImageDecodeError"
    INVALID_FIELD = "InvalidField"


class ResizeHandle(str, Enum):
    """Corner handle grabbed while resizing a field box."""
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"


class RotateDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
