"""Signature feature exceptions.

Every exception carries a stable ``reason`` string; per-field failures are
reported to callers under that name.
"""
from __future__ import annotations


class SignatureError(Exception):
    """Base exception for the signature feature."""

    reason = "SignatureError"


class InvalidArgument(SignatureError, ValueError):
    """Raised for numeric input outside a function's domain (caller bug)."""

    reason = "InvalidArgument"


class UnsupportedFormat(SignatureError):
    """Raised when a signature image is neither PNG nor JPEG."""

    reason = "UnsupportedFormat"


class ImageDecodeError(SignatureError):
    """Raised when a signature image payload cannot be decoded."""

    reason = "ImageDecodeError"


class OutOfRangePage(SignatureError):
    """Raised when a field targets a page the document does not have."""

    reason = "OutOfRangePage"


class CorruptDocument(SignatureError):
    """Raised when the source PDF bytes cannot be parsed."""

    reason = "CorruptDocument"
