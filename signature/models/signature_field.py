# signature/models/signature_field.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from ..exceptions.errors import InvalidArgument
from .numbers import require_finite, require_positive

_DATA_URI_FORMAT = re.compile(r"^data:image/([A-Za-z0-9.+-]+)[;,]")
_FORMAT_ALIASES = {"jpg": "jpeg", "pjpeg": "jpeg", "x-png": "png"}


def normalize_image_format(name: Optional[str]) -> Optional[str]:
    """'PNG' -> 'png', 'jpg' -> 'jpeg'; unknown names are kept (lower-cased)."""
    if name is None:
        return None
    name = str(name).strip().lower()
    if name.startswith("image/"):
        name = name[len("image/"):]
    return _FORMAT_ALIASES.get(name, name) or None


def format_from_data_uri(payload: Any) -> Optional[str]:
    if not isinstance(payload, str):
        return None
    m = _DATA_URI_FORMAT.match(payload.strip())
    return normalize_image_format(m.group(1)) if m else None


@dataclass(frozen=True)
class FieldDefaults:
    """Values applied once, at ingestion, to persisted records that omit them."""
    page: int = 1
    x: float = 50.0
    y: float = 50.0
    width: float = 180.0
    height: float = 60.0
    rotation: float = 0.0
    image_format: str = "png"

    @classmethod
    def from_config(cls, cfg) -> "FieldDefaults":
        """Build from a :class:`core.config.config_service.SignatureConfig`."""
        return cls(
            page=int(cfg.default_page),
            x=float(cfg.default_x),
            y=float(cfg.default_y),
            width=float(cfg.default_width),
            height=float(cfg.default_height),
            rotation=float(cfg.default_rotation),
            image_format=normalize_image_format(cfg.default_image_format) or "png",
        )


@dataclass(frozen=True)
class SignatureField:
    """
    One signature placement, anchored to a page.

    x, y, width, height are PDF points; rotation is in degrees.
    The record is read-only input for the embedder.
    """
    id: str
    page: int
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    image: Union[bytes, str] = field(default=b"", repr=False)
    image_format: str = "png"

    def __post_init__(self) -> None:
        if isinstance(self.page, bool) or not isinstance(self.page, int):
            raise InvalidArgument(f"page must be an integer, got {self.page!r}")
        if self.page < 1:
            raise InvalidArgument(f"page must be >= 1, got {self.page!r}")
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "x", require_finite("x", self.x))
        object.__setattr__(self, "y", require_finite("y", self.y))
        object.__setattr__(self, "width", require_positive("width", self.width))
        object.__setattr__(self, "height", require_positive("height", self.height))
        object.__setattr__(self, "rotation", require_finite("rotation", self.rotation))
        object.__setattr__(self, "image_format",
                           normalize_image_format(self.image_format) or "png")

    # -------- Ingestion ------------------------------------------------------
    @classmethod
    def from_record(cls, record: Mapping[str, Any], *,
                    defaults: Optional[FieldDefaults] = None,
                    fallback_id: Optional[str] = None) -> "SignatureField":
        """
        Build a field from a persisted record, applying *defaults* to missing keys.

        Accepted shapes:
          flat:    {id, page, x, y, width, height, rotation, image, imageFormat}
          signer:  {_id, signatureData: {page, x, y, width, height, rotation, image, type}}
          overlay: {id, ..., signature: {data, type}}
        """
        if not isinstance(record, Mapping):
            raise InvalidArgument(f"field record must be a mapping, got {type(record).__name__}")
        d = defaults or FieldDefaults()

        nested = record.get("signatureData")
        data: Mapping[str, Any] = nested if isinstance(nested, Mapping) else record

        def pick(key: str, default):
            val = data.get(key)
            if val is None:
                val = record.get(key)
            return default if val is None else val

        field_id = record.get("id")
        if field_id is None:
            field_id = record.get("_id", fallback_id)
        if field_id is None:
            raise InvalidArgument("field record has no id")

        image = data.get("image")
        if image is None:
            sig = record.get("signature")
            if isinstance(sig, Mapping):
                image = sig.get("data")
        if image is None:
            image = record.get("image", b"")

        fmt = (data.get("imageFormat") or data.get("image_format")
               or record.get("imageFormat") or record.get("image_format")
               or format_from_data_uri(image)
               or d.image_format)

        page = pick("page", d.page)
        if isinstance(page, float) and page.is_integer():
            page = int(page)

        return cls(
            id=field_id,
            page=page,
            x=pick("x", d.x),
            y=pick("y", d.y),
            width=pick("width", d.width),
            height=pick("height", d.height),
            rotation=pick("rotation", d.rotation),
            image=image,
            image_format=fmt,
        )
