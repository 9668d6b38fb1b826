# signature/logic/field_geometry.py
from __future__ import annotations

import math
from dataclasses import dataclass, replace

from ..models.numbers import require_finite, require_positive
from ..models.signature_enums import ResizeHandle, RotateDirection
from ..models.signature_field import SignatureField


@dataclass(frozen=True)
class HandleLimits:
    """Minimum box size and rotation step used by the resize/rotate handles (points, degrees)."""
    min_width: float = 40.0
    min_height: float = 20.0
    rotation_step: float = 15.0

    @classmethod
    def from_config(cls, cfg) -> "HandleLimits":
        """Build from a :class:`core.config.config_service.SignatureConfig`."""
        return cls(
            min_width=require_positive("min_width", float(cfg.min_width)),
            min_height=require_positive("min_height", float(cfg.min_height)),
            rotation_step=require_positive("rotation_step", float(cfg.rotation_step)),
        )


DEFAULT_LIMITS = HandleLimits()


def drag_to(field: SignatureField, pointer_x: float, pointer_y: float,
            grab_offset_x: float, grab_offset_y: float, scale: float) -> SignatureField:
    """
    Move *field* so the point grabbed at (grab_offset_x, grab_offset_y)
    follows the pointer. Pointer and offsets are screen pixels.
    """
    scale = require_positive("scale", scale)
    return replace(
        field,
        x=(require_finite("pointer_x", pointer_x) - grab_offset_x) / scale,
        y=(require_finite("pointer_y", pointer_y) - grab_offset_y) / scale,
    )


def resize_from_handle(field: SignatureField, handle: ResizeHandle | str,
                       pointer_x: float, pointer_y: float, *,
                       min_width: float = DEFAULT_LIMITS.min_width,
                       min_height: float = DEFAULT_LIMITS.min_height) -> SignatureField:
    """
    Resize *field* by dragging one corner to (pointer_x, pointer_y).

    Coordinates are in the field's own space with Y growing toward
    ``y + height`` (the overlay's top-left convention). The corner opposite
    the handle stays fixed; sizes never drop below the minimums.
    """
    handle = ResizeHandle(handle)
    pointer_x = require_finite("pointer_x", pointer_x)
    pointer_y = require_finite("pointer_y", pointer_y)
    left, top = field.x, field.y
    right, bottom = field.x + field.width, field.y + field.height

    if handle in (ResizeHandle.SE, ResizeHandle.NE):
        width = max(min_width, pointer_x - left)
    else:
        width = max(min_width, right - pointer_x)
    if handle in (ResizeHandle.SE, ResizeHandle.SW):
        height = max(min_height, pointer_y - top)
    else:
        height = max(min_height, bottom - pointer_y)

    x, y = field.x, field.y
    if handle in (ResizeHandle.SW, ResizeHandle.NW):
        x = field.x + (field.width - width)
    if handle in (ResizeHandle.NE, ResizeHandle.NW):
        y = field.y + (field.height - height)
    return replace(field, x=x, y=y, width=width, height=height)


def rotation_from_pointer(center_x: float, center_y: float,
                          pointer_x: float, pointer_y: float,
                          start_offset: float = 0.0) -> float:
    """Angle of the pointer around the centre, minus *start_offset*, in [0, 360)."""
    angle = math.degrees(math.atan2(pointer_y - center_y, pointer_x - center_x))
    return (angle - start_offset) % 360.0


def step_rotation(rotation: float, direction: RotateDirection | str,
                  step: float = DEFAULT_LIMITS.rotation_step) -> float:
    direction = RotateDirection(direction)
    if direction is RotateDirection.LEFT:
        return rotation - step
    return rotation + step


def rotate_field(field: SignatureField, direction: RotateDirection | str,
                 step: float = DEFAULT_LIMITS.rotation_step) -> SignatureField:
    return replace(field, rotation=step_rotation(field.rotation, direction, step))
