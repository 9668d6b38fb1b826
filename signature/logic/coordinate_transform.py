"""
Mapping between screen space and PDF space for a single rendered page.

Screen space: rendered pixels, origin top-left, Y grows downward.
PDF space:    points (1/72 inch), origin bottom-left, Y grows upward.

``screen_to_pdf`` and ``pdf_to_screen`` are deliberately not exact inverses:
a click marks the visual top-left of the field, while the stored anchor is
the field's bottom-left, so ``screen_to_pdf`` subtracts the field height and
``pdf_to_screen`` does not add it back.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models.geometry import Bounds, PdfPoint, ScreenPoint
from ..models.numbers import require_finite, require_non_negative, require_positive


def screen_to_pdf(screen_x: float, screen_y: float, page_height_points: float,
                  scale: float, field_height_points: float = 0.0) -> PdfPoint:
    """
    Convert a pointer position to the PDF-space anchor of a field placed there.

    :param scale: screen pixels per PDF point (rendered width / page width)
    :param field_height_points: height of the field being placed
    :raises InvalidArgument: scale or page height not > 0, negative field height
    """
    scale = require_positive("scale", scale)
    page_height_points = require_positive("page_height_points", page_height_points)
    field_height_points = require_non_negative("field_height_points", field_height_points)
    screen_x = require_finite("screen_x", screen_x)
    screen_y = require_finite("screen_y", screen_y)

    return PdfPoint(
        x=screen_x / scale,
        y=page_height_points - screen_y / scale - field_height_points,
    )


def pdf_to_screen(pdf_x: float, pdf_y: float, page_height_points: float,
                  scale: float) -> ScreenPoint:
    """Place a stored PDF-space point back onto the rendered page."""
    scale = require_positive("scale", scale)
    page_height_points = require_positive("page_height_points", page_height_points)
    pdf_x = require_finite("pdf_x", pdf_x)
    pdf_y = require_finite("pdf_y", pdf_y)

    return ScreenPoint(
        x=pdf_x * scale,
        y=(page_height_points - pdf_y) * scale,
    )


def bounds_of(field: Any) -> Bounds:
    """
    Box of a field in whatever space its x/y/width/height are expressed in.
    Accepts an object with those attributes or a mapping with those keys.
    """
    if isinstance(field, Mapping):
        x, y, w, h = field["x"], field["y"], field["width"], field["height"]
    else:
        x, y, w, h = field.x, field.y, field.width, field.height
    return Bounds(left=x, top=y, right=x + w, bottom=y + h)


def contains_point(x: float, y: float, bounds: Bounds) -> bool:
    """Inclusive hit test."""
    return bounds.left <= x <= bounds.right and bounds.top <= y <= bounds.bottom
