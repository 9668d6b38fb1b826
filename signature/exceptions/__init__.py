from .errors import (
    CorruptDocument,
    ImageDecodeError,
    InvalidArgument,
    OutOfRangePage,
    SignatureError,
    UnsupportedFormat,
)

__all__ = [
    "CorruptDocument",
    "ImageDecodeError",
    "InvalidArgument",
    "OutOfRangePage",
    "SignatureError",
    "UnsupportedFormat",
]
